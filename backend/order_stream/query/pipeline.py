"""
Joins and the fluent query pipeline

Joins go through a RelationIndex:

    expand_products_to_orders   product -> every order containing it
    expand_orders_to_products   order   -> every product on it
    customers_of                order   -> its customer (no fan-out)

Fan-out joins keep duplicates (a product on two matching orders appears
twice) unless distinct=True, which dedups by entity id and keeps the first
occurrence.

Pipeline chains the same stages over a materialized list:

    (Pipeline(snapshot.orders, index)
        .where(ordered_on(date(2021, 3, 15)))
        .products()
        .distinct()
        .to_list())

Every stage returns a new Pipeline; the source list is never modified.

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from order_stream.domain.order import Customer, Order
from order_stream.domain.product import Product
from order_stream.query import aggregation as agg
from order_stream.query.ordering import NullsPolicy, sort_by, top_k
from order_stream.query.predicates import select
from order_stream.query.relation_index import RelationIndex

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _entity_id(item: Any) -> Any:
    # plain values are their own identity
    return getattr(item, 'id', item)


def distinct_by_id(items: Iterable[T], key: Callable[[T], Any] = _entity_id) -> List[T]:
    """First occurrence of each identity, in source order"""
    seen = set()
    result = []
    for item in items:
        identity = key(item)
        if identity in seen:
            continue
        seen.add(identity)
        result.append(item)
    return result


def expand_products_to_orders(
    index: RelationIndex,
    products: Iterable[Product],
    distinct: bool = False,
) -> List[Order]:
    """Orders containing each product, concatenated in product order"""
    orders = []
    for product in products:
        orders.extend(index.orders_containing(product))
    return distinct_by_id(orders) if distinct else orders


def expand_orders_to_products(
    index: RelationIndex,
    orders: Iterable[Order],
    distinct: bool = False,
) -> List[Product]:
    """Products on each order, concatenated in order order"""
    products = []
    for order in orders:
        products.extend(index.products_of(order))
    return distinct_by_id(products) if distinct else products


def customers_of(index: RelationIndex, orders: Iterable[Order]) -> List[Customer]:
    """One customer per order, duplicates kept"""
    return [index.customer_of(order) for order in orders]


class Pipeline(Generic[T]):
    """
    Fluent chain of query stages over a list of entities

    The index is only needed for the join stages (products, orders,
    customers); a Pipeline over plain values works without one.
    """

    def __init__(self, items: Iterable[T], index: Optional[RelationIndex] = None):
        self._items: List[T] = list(items)
        self._index = index

    def _next(self, items: Iterable[Any]) -> 'Pipeline':
        return Pipeline(items, self._index)

    def _require_index(self) -> RelationIndex:
        if self._index is None:
            raise ValueError("This stage needs a RelationIndex; build the Pipeline with one")
        return self._index

    # ------------------------------------------------------------------
    # Intermediate stages
    # ------------------------------------------------------------------

    def where(self, predicate: Callable[[T], bool]) -> 'Pipeline[T]':
        return self._next(select(self._items, predicate))

    filter = where

    def map(self, fn: Callable[[T], Any]) -> 'Pipeline':
        return self._next(fn(item) for item in self._items)

    def flat_map(self, fn: Callable[[T], Iterable[Any]]) -> 'Pipeline':
        return self._next(value for item in self._items for value in fn(item))

    def distinct(self, key: Callable[[T], Any] = _entity_id) -> 'Pipeline[T]':
        return self._next(distinct_by_id(self._items, key))

    def sorted(
        self,
        key: Callable[[T], Any],
        descending: bool = False,
        nulls: NullsPolicy = NullsPolicy.LAST,
    ) -> 'Pipeline[T]':
        return self._next(sort_by(self._items, key, descending=descending, nulls=nulls))

    def limit(self, k: int) -> 'Pipeline[T]':
        if k < 0:
            raise ValueError(f"limit must be non-negative, got {k}")
        return self._next(self._items[:k])

    def top_k(
        self,
        k: int,
        key: Callable[[T], Any],
        descending: bool = False,
        nulls: NullsPolicy = NullsPolicy.LAST,
    ) -> 'Pipeline[T]':
        return self._next(top_k(self._items, k, key, descending=descending, nulls=nulls))

    def products(self, distinct: bool = False) -> 'Pipeline[Product]':
        """Orders -> their products"""
        return self._next(expand_orders_to_products(self._require_index(), self._items, distinct))

    def orders(self, distinct: bool = False) -> 'Pipeline[Order]':
        """Products -> orders containing them"""
        return self._next(expand_products_to_orders(self._require_index(), self._items, distinct))

    def customers(self) -> 'Pipeline[Customer]':
        """Orders -> the customer of each"""
        return self._next(customers_of(self._require_index(), self._items))

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def to_list(self) -> List[T]:
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def first(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def any_match(self, predicate: Callable[[T], bool]) -> bool:
        return any(predicate(item) for item in self._items)

    def aggregate(self, aggregation: agg.Aggregation) -> Any:
        return aggregation.apply(self._items)

    def group_by(self, key: Callable[[T], Any], downstream: Optional[agg.Aggregation] = None) -> Dict[Any, Any]:
        return agg.group_by(self._items, key, downstream)

    def to_map(
        self,
        key: Callable[[T], Any],
        value: Callable[[T], Any] = agg.identity,
        merge=agg.MergeStrategy.ERROR,
    ) -> Dict[Any, Any]:
        return agg.to_map(self._items, key, value, merge)

    def reduce(self, fn: Callable[[Any, T], Any], initial: Any) -> Any:
        return agg.reduce_items(self._items, fn, initial)

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
