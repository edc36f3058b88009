"""
Relation Index

Precomputed traversal structures over one snapshot:

    orders_by_customer   customer id -> orders placed by that customer
    orders_by_product    product id  -> orders containing that product
    products_by_order    order id    -> the order's products

The index is a disposable view. It is not updated when the collections
change; build a new one per query session.

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Dict, Iterable, List, TypeVar

from order_stream.core.exceptions import DuplicateKeyError, MissingReferenceError
from order_stream.domain.order import Customer, Order
from order_stream.domain.product import Product

logger = logging.getLogger(__name__)

E = TypeVar('E', Customer, Order, Product)


def _resolve_products(order: Order, products_by_id: Dict[int, Product]) -> List[Product]:
    """Products on an order, ordered by product id so results are deterministic"""
    resolved = []
    for product_id in sorted(order.product_ids):
        product = products_by_id.get(product_id)
        if product is None:
            raise MissingReferenceError(order.id, 'product', product_id)
        resolved.append(product)
    return resolved


def _index_by_id(entities: Iterable[E], kind: str) -> Dict[int, E]:
    indexed: Dict[int, E] = {}
    for entity in entities:
        if entity.id in indexed:
            raise DuplicateKeyError(entity.id, f"Duplicate {kind} id in snapshot: {entity.id}")
        indexed[entity.id] = entity
    return indexed


class RelationIndex:
    """Lookup tables for joins between customers, orders and products"""

    def __init__(
        self,
        customers_by_id: Dict[int, Customer],
        orders_by_id: Dict[int, Order],
        products_by_id: Dict[int, Product],
        orders_by_customer: Dict[int, List[Order]],
        orders_by_product: Dict[int, List[Order]],
        products_by_order: Dict[int, List[Product]],
    ):
        self.customers_by_id = customers_by_id
        self.orders_by_id = orders_by_id
        self.products_by_id = products_by_id
        self.orders_by_customer = orders_by_customer
        self.orders_by_product = orders_by_product
        self.products_by_order = products_by_order

    @classmethod
    def build(
        cls,
        customers: Iterable[Customer],
        orders: Iterable[Order],
        products: Iterable[Product],
    ) -> 'RelationIndex':
        """
        Build the index in one pass over the orders

        Raises:
            DuplicateKeyError: two entities of one kind share an id
            MissingReferenceError: an order points at an unknown customer or product
        """
        customers_by_id = _index_by_id(customers, 'customer')
        products_by_id = _index_by_id(products, 'product')
        orders_by_id = _index_by_id(orders, 'order')

        orders_by_customer: Dict[int, List[Order]] = {cid: [] for cid in customers_by_id}
        orders_by_product: Dict[int, List[Order]] = {pid: [] for pid in products_by_id}
        products_by_order: Dict[int, List[Product]] = {}

        for order in orders_by_id.values():
            if order.customer_id not in customers_by_id:
                raise MissingReferenceError(order.id, 'customer', order.customer_id)
            orders_by_customer[order.customer_id].append(order)

            order_products = _resolve_products(order, products_by_id)
            for product in order_products:
                orders_by_product[product.id].append(order)
            products_by_order[order.id] = order_products

        logger.debug(
            f"RelationIndex built: {len(customers_by_id)} customers, "
            f"{len(orders_by_id)} orders, {len(products_by_id)} products"
        )
        return cls(
            customers_by_id=customers_by_id,
            orders_by_id=orders_by_id,
            products_by_id=products_by_id,
            orders_by_customer=orders_by_customer,
            orders_by_product=orders_by_product,
            products_by_order=products_by_order,
        )

    def customer_of(self, order: Order) -> Customer:
        """Resolve the customer who placed an order"""
        customer = self.customers_by_id.get(order.customer_id)
        if customer is None:
            raise MissingReferenceError(order.id, 'customer', order.customer_id)
        return customer

    def products_of(self, order: Order) -> List[Product]:
        """Products on an order, ordered by product id"""
        cached = self.products_by_order.get(order.id)
        if cached is not None:
            return cached
        # Order from outside the snapshot: resolve against this index
        return _resolve_products(order, self.products_by_id)

    def orders_containing(self, product: Product) -> List[Order]:
        """Orders containing a product, in snapshot order"""
        return self.orders_by_product.get(product.id, [])

    def orders_of(self, customer: Customer) -> List[Order]:
        return self.orders_by_customer.get(customer.id, [])
