"""
Order Query Service
Catalog, order and customer queries answered from an in-memory snapshot

Author: TM3
Date: 2025-10-17
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Union

from order_stream.core.config import settings
from order_stream.domain.order import Customer, Order
from order_stream.domain.product import Product
from order_stream.query.aggregation import (
    AndThen,
    Count,
    Mapping,
    MaxBy,
    SummaryStatistics,
    Sum,
    average,
    group_by,
    keep_max_by,
    reduce_items,
    sum_of,
    summary_statistics,
    to_map,
)
from order_stream.query.pipeline import Pipeline
from order_stream.query.predicates import (
    category_is,
    customer_tier_is,
    ordered_between,
    ordered_in_month,
    ordered_on,
    price_above,
)
from order_stream.query.relation_index import RelationIndex
from order_stream.repositories.snapshot_repository import (
    Snapshot,
    SnapshotRepository,
    load_snapshot,
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
Number = Union[int, float, Decimal]


def _price(product: Product) -> Decimal:
    return product.price


class OrderQueryService:
    """
    Service for querying one snapshot of customers, orders and products

    Handles:
    - Product selection by category and price
    - Joins between orders, products and customers
    - Top-K (cheapest products, most recent orders)
    - Totals, averages and statistics over product prices
    - Grouping orders by customer and products by category

    The RelationIndex is built once in the constructor. If the snapshot
    changes (e.g. after a discount), create a new service.
    """

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot
        self.index = RelationIndex.build(snapshot.customers, snapshot.orders, snapshot.products)

    @classmethod
    def from_repository(cls, repository: SnapshotRepository) -> 'OrderQueryService':
        return cls(load_snapshot(repository))

    def _products(self) -> Pipeline[Product]:
        return Pipeline(self.snapshot.products, self.index)

    def _orders(self) -> Pipeline[Order]:
        return Pipeline(self.snapshot.orders, self.index)

    # ========================================================================
    # Selection
    # ========================================================================

    def products_in_category(self, category: str) -> List[Product]:
        """Products of one category, in catalog order"""
        return self._products().where(category_is(category)).to_list()

    def products_in_category_above(self, category: str, min_price: Number) -> List[Product]:
        """
        Products of a category priced strictly above min_price

        Example: products_in_category_above("Books", 100)
        """
        return self._products().where(category_is(category) & price_above(min_price)).to_list()

    # ========================================================================
    # Joins
    # ========================================================================

    def orders_with_category(self, category: str, distinct: bool = False) -> List[Order]:
        """
        Orders containing at least one product of a category

        Without distinct an order is listed once per matching product it
        contains.
        """
        return self._products().where(category_is(category)).orders(distinct=distinct).to_list()

    def products_ordered_by_tier_between(self, tier: int, start: date, end: date) -> List[Product]:
        """
        Products ordered by customers of a tier between start and end (inclusive)

        Each product is listed once, in catalog order.
        """
        matching = customer_tier_is(self.index, tier) & ordered_between(start, end)
        return (
            self._products()
            .where(lambda p: any(matching(o) for o in self.index.orders_containing(p)))
            .to_list()
        )

    def products_ordered_on(self, day: date) -> List[Product]:
        """Distinct products on orders placed on a given day"""
        return self._orders().where(ordered_on(day)).products(distinct=True).to_list()

    # ========================================================================
    # Ordering / Top-K
    # ========================================================================

    def cheapest_in_category(self, category: str, k: Optional[int] = None) -> List[Product]:
        """k cheapest products of a category; ties keep catalog order"""
        k = settings.DEFAULT_TOP_K if k is None else k
        return self._products().where(category_is(category)).top_k(k, _price).to_list()

    def most_recent_orders(self, k: Optional[int] = None) -> List[Order]:
        """k most recently placed orders, newest first"""
        k = settings.DEFAULT_TOP_K if k is None else k
        return self._orders().top_k(k, lambda o: o.order_date, descending=True).to_list()

    # ========================================================================
    # Reduction
    # ========================================================================

    def total_for_month(self, year: int, month: int) -> Decimal:
        """Sum of product prices over all orders placed in a month"""
        products = self._orders().where(ordered_in_month(year, month)).products()
        total = products.aggregate(Sum(_price, ZERO))
        logger.debug(f"Total for {year}-{month:02d}: {total} over {len(products)} products")
        return total

    def total_for_month_by_reduce(self, year: int, month: int) -> Decimal:
        """Same as total_for_month, written as a left fold"""
        products = self._orders().where(ordered_in_month(year, month)).products()
        return products.reduce(lambda acc, p: acc + p.price, ZERO)

    def average_price_on(self, day: date) -> Decimal:
        """
        Average price of the distinct products ordered on a day

        Raises:
            EmptyAggregationError: nothing was ordered that day
        """
        return average(self.products_ordered_on(day), _price)

    def category_statistics(self, category: str) -> SummaryStatistics:
        """count / total / min / max / average of prices in a category"""
        return summary_statistics(self.products_in_category(category), _price, ZERO)

    # ========================================================================
    # Grouping / keyed collection
    # ========================================================================

    def product_count_by_order(self) -> Dict[int, int]:
        """order id -> number of products on the order"""
        return to_map(self.snapshot.orders, lambda o: o.id, lambda o: o.product_count)

    def orders_by_customer(self) -> Dict[int, List[Order]]:
        """customer id -> orders, for customers with at least one order"""
        return group_by(self.snapshot.orders, lambda o: o.customer_id)

    def order_ids_by_customer(self) -> Dict[int, List[int]]:
        """customer id -> ids of that customer's orders"""
        return group_by(self.snapshot.orders, lambda o: o.customer_id, Mapping(lambda o: o.id))

    def customers_with_orders(self) -> List[Customer]:
        """Distinct customers who placed at least one order"""
        return self._orders().customers().distinct().to_list()

    def order_totals(self) -> Dict[int, Decimal]:
        """order id -> sum of its product prices"""
        return to_map(
            self.snapshot.orders,
            lambda o: o.id,
            lambda o: sum_of(self.index.products_of(o), _price, ZERO),
        )

    def order_totals_by_reduce(self) -> Dict[int, Decimal]:
        """Same as order_totals, each total written as a left fold"""
        return to_map(
            self.snapshot.orders,
            lambda o: o.id,
            lambda o: reduce_items(self.index.products_of(o), lambda acc, p: acc + p.price, ZERO),
        )

    def product_names_by_category(self) -> Dict[str, List[str]]:
        """category -> product names, in catalog order"""
        return group_by(self.snapshot.products, lambda p: p.category, Mapping(lambda p: p.name))

    def product_count_by_category(self) -> Dict[str, int]:
        return group_by(self.snapshot.products, lambda p: p.category, Count())

    def most_expensive_by_category(self) -> Dict[str, Product]:
        """
        category -> most expensive product

        Collected with a merge function that keeps the higher price; on
        equal prices the product listed first in the catalog stays.
        """
        return to_map(self.snapshot.products, lambda p: p.category, merge=keep_max_by(_price))

    def most_expensive_name_by_category(self) -> Dict[str, str]:
        """category -> name of its most expensive product"""
        return group_by(
            self.snapshot.products,
            lambda p: p.category,
            AndThen(MaxBy(_price), lambda p: p.name),
        )
