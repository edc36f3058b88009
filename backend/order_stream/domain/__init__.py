"""
Domain Layer - Business Entities

This layer contains Pydantic models representing the customers, orders and
products a query runs against.

Author: TM3
Date: 2025-10-17
"""
from order_stream.domain.product import Product
from order_stream.domain.order import Order, Customer

__all__ = ['Product', 'Order', 'Customer']
