"""
Order Domain Models

Represents customers and orders. An order holds the ids of its customer and
products; traversal in the other direction goes through the RelationIndex.

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, FrozenSet
from datetime import date


class Customer(BaseModel):
    """
    Customer domain model

    tier is the loyalty level (1 = base, 3 = highest).
    """

    id: int = Field(..., description="Customer ID")
    name: str = Field(..., description="Customer name")
    tier: int = Field(..., description="Loyalty tier", ge=1)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    def to_dict(self) -> dict:
        return self.model_dump()


class Order(BaseModel):
    """
    Order domain model

    Fields:
        id: Order ID (unique within a snapshot)
        order_date: Date order was placed
        delivery_date: Date order was delivered, None while undelivered
        status: Order status (NEW, PENDING, DELIVERED, ...)
        customer_id: Reference to the customer who placed it
        product_ids: Distinct products on the order
    """

    id: int = Field(..., description="Order ID")
    order_date: date = Field(..., description="Order date")
    delivery_date: Optional[date] = Field(None, description="Delivery date")
    status: str = Field(..., description="Order status")
    customer_id: int = Field(..., description="Customer ID")
    product_ids: FrozenSet[int] = Field(default_factory=frozenset, description="Product IDs")

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator('product_ids', mode='before')
    @classmethod
    def reject_duplicate_products(cls, value):
        """An order's products are a set: a repeated id in the input is an error"""
        if isinstance(value, (list, tuple)) and len(set(value)) != len(value):
            raise ValueError(f"duplicate product ids in order: {sorted(value)}")
        return value

    @property
    def product_count(self) -> int:
        """Number of distinct products on the order"""
        return len(self.product_ids)

    @property
    def is_delivered(self) -> bool:
        return self.delivery_date is not None

    def to_dict(self) -> dict:
        """
        Convert to dictionary

        Dates become ISO strings and product_ids a sorted list so the result
        is JSON-friendly.
        """
        data = self.model_dump()
        data['order_date'] = self.order_date.isoformat()
        data['delivery_date'] = self.delivery_date.isoformat() if self.delivery_date else None
        data['product_ids'] = sorted(self.product_ids)
        data['product_count'] = self.product_count
        return data
