"""
Product Domain Model

Represents a product in the catalog a query runs against.

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from decimal import Decimal


class Product(BaseModel):
    """
    Product domain model

    Fields:
        id: Product ID (unique within a snapshot)
        name: Product name
        category: Product category (Books, Toys, Baby, ...)
        price: Unit price, never negative

    price is the one field that may change after load, and only through
    pricing_service.apply_discount. Assignments are validated, so a
    negative price is rejected there too.
    """

    id: int = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    category: str = Field(..., description="Product category", min_length=1)
    price: Decimal = Field(..., description="Unit price", ge=0)

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['price'] = float(data['price'])
        return data
