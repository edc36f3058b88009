"""
Selection predicates

A Predicate wraps a one-argument test and composes with & (and), | (or)
and ~ (not). bind() turns a two-argument test plus an auxiliary value into
a Predicate, so "category equals X" can be defined once and X supplied
later.

Example:
    books_over_100 = category_is("Books") & price_above(100)
    select(products, books_over_100)

Author: TM3
Date: 2025-10-17
"""
from datetime import date
from decimal import Decimal
from typing import Callable, Generic, Iterable, List, Optional, TypeVar, Union

from order_stream.domain.order import Order
from order_stream.domain.product import Product
from order_stream.query.relation_index import RelationIndex

T = TypeVar('T')
V = TypeVar('V')


class Predicate(Generic[T]):
    """Composable boolean test over one element"""

    def __init__(self, test: Callable[[T], bool], name: Optional[str] = None):
        self._test = test
        self.name = name or getattr(test, '__name__', 'predicate')

    def __call__(self, item: T) -> bool:
        return bool(self._test(item))

    def __and__(self, other: Callable[[T], bool]) -> 'Predicate[T]':
        other = as_predicate(other)
        return Predicate(lambda item: self(item) and other(item), f"({self.name} and {other.name})")

    def __or__(self, other: Callable[[T], bool]) -> 'Predicate[T]':
        other = as_predicate(other)
        return Predicate(lambda item: self(item) or other(item), f"({self.name} or {other.name})")

    def __invert__(self) -> 'Predicate[T]':
        return Predicate(lambda item: not self(item), f"not {self.name}")

    def and_(self, other: Callable[[T], bool]) -> 'Predicate[T]':
        return self & other

    def or_(self, other: Callable[[T], bool]) -> 'Predicate[T]':
        return self | other

    def __repr__(self) -> str:
        return f"Predicate({self.name})"


def as_predicate(test: Union[Predicate[T], Callable[[T], bool]]) -> Predicate[T]:
    if isinstance(test, Predicate):
        return test
    return Predicate(test)


def bind(test: Callable[[T, V], bool], value: V) -> Predicate[T]:
    """Fix the auxiliary argument of a two-argument test"""
    name = getattr(test, '__name__', 'predicate')
    return Predicate(lambda item: test(item, value), f"{name}({value!r})")


def all_of(*tests: Callable[[T], bool]) -> Predicate[T]:
    """Conjunction of any number of tests (true for zero tests)"""
    predicates = [as_predicate(t) for t in tests]
    return Predicate(lambda item: all(p(item) for p in predicates), 'all_of')


def select(items: Iterable[T], predicate: Callable[[T], bool]) -> List[T]:
    """
    Elements satisfying predicate, in source order

    Returns a new list; no dedup, and elements are never modified.
    """
    return [item for item in items if predicate(item)]


# ============================================================================
# Product predicates
# ============================================================================

def category_equals(product: Product, category: str) -> bool:
    return product.category == category


def category_is(category: str) -> Predicate[Product]:
    return bind(category_equals, category)


def price_above(threshold: Union[int, float, Decimal]) -> Predicate[Product]:
    """Strictly greater than threshold"""
    limit = Decimal(str(threshold))
    return Predicate(lambda p: p.price > limit, f"price_above({threshold})")


# ============================================================================
# Order predicates
# ============================================================================

def ordered_on(day: date) -> Predicate[Order]:
    return Predicate(lambda o: o.order_date == day, f"ordered_on({day})")


def ordered_between(start: date, end: date) -> Predicate[Order]:
    """Order date within [start, end], both ends inclusive"""
    if end < start:
        raise ValueError(f"Empty date range: {start} > {end}")
    return Predicate(lambda o: start <= o.order_date <= end, f"ordered_between({start}, {end})")


def ordered_in_month(year: int, month: int) -> Predicate[Order]:
    return Predicate(
        lambda o: o.order_date.year == year and o.order_date.month == month,
        f"ordered_in_month({year}-{month:02d})",
    )


def status_is(status: str) -> Predicate[Order]:
    return Predicate(lambda o: o.status == status, f"status_is({status})")


def is_delivered() -> Predicate[Order]:
    return Predicate(lambda o: o.delivery_date is not None, 'is_delivered')


def customer_tier_is(index: RelationIndex, tier: int) -> Predicate[Order]:
    """Orders whose customer has the given tier (resolved through a RelationIndex)"""
    return Predicate(lambda o: index.customer_of(o).tier == tier, f"customer_tier_is({tier})")
