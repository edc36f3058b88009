"""
Snapshot Repository - loading customers, orders and products

Author: TM3
Date: 2025-10-17
"""
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import List, Protocol, Sequence, Union

from order_stream.domain.order import Customer, Order
from order_stream.domain.product import Product

logger = logging.getLogger(__name__)


class SnapshotRepository(Protocol):
    """What the engine needs from a persistence collaborator"""

    def load_all_customers(self) -> Sequence[Customer]: ...

    def load_all_orders(self) -> Sequence[Order]: ...

    def load_all_products(self) -> Sequence[Product]: ...


@dataclass(frozen=True)
class Snapshot:
    """The three collections a query session reads"""
    customers: List[Customer]
    orders: List[Order]
    products: List[Product]


class InMemorySnapshotRepository:
    """Repository over collections already held in memory (tests, scripts)"""

    def __init__(
        self,
        customers: Sequence[Customer],
        orders: Sequence[Order],
        products: Sequence[Product],
    ):
        self._customers = list(customers)
        self._orders = list(orders)
        self._products = list(products)

    def load_all_customers(self) -> List[Customer]:
        return list(self._customers)

    def load_all_orders(self) -> List[Order]:
        return list(self._orders)

    def load_all_products(self) -> List[Product]:
        return list(self._products)


class JsonSnapshotRepository:
    """
    Repository reading a JSON document of the form

        {"customers": [...], "orders": [...], "products": [...]}

    Rows are validated through the domain models, so a malformed row raises
    pydantic.ValidationError. The file is read once, on first access.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data = None

    def _load(self) -> dict:
        if self._data is None:
            with open(self.path, 'r', encoding='utf-8') as f:
                # Decimal keeps prices exact
                self._data = json.load(f, parse_float=Decimal)
            logger.info(f"Loaded snapshot from {self.path}")
        return self._data

    def load_all_customers(self) -> List[Customer]:
        return [Customer.model_validate(row) for row in self._load().get('customers', [])]

    def load_all_orders(self) -> List[Order]:
        return [Order.model_validate(row) for row in self._load().get('orders', [])]

    def load_all_products(self) -> List[Product]:
        return [Product.model_validate(row) for row in self._load().get('products', [])]


def load_snapshot(repository: SnapshotRepository) -> Snapshot:
    """Read all three collections from a repository"""
    snapshot = Snapshot(
        customers=list(repository.load_all_customers()),
        orders=list(repository.load_all_orders()),
        products=list(repository.load_all_products()),
    )
    logger.debug(
        f"Snapshot: {len(snapshot.customers)} customers, "
        f"{len(snapshot.orders)} orders, {len(snapshot.products)} products"
    )
    return snapshot
