"""
Grouping and reduction

Each reduction is a small strategy object with one apply(items) method, so
its empty-input and tie-break behaviour lives in exactly one place:

    Count          number of elements (0 for empty input)
    ToList         elements as a list
    Sum            sum of a projection (start value for empty input)
    Average        mean of a projection, EmptyAggregationError when empty
    MinBy / MaxBy  extreme element by key, first one wins ties,
                   EmptyAggregationError when empty
    SummaryStats   count, total, min, max and average in one pass
    Mapping        project each element, then hand off to a downstream strategy
    AndThen        run a strategy, then transform its result
    GroupThenReduce  partition by key, reduce each group with a downstream strategy

Module-level helpers (average, max_by, group_by, to_map, ...) are thin
wrappers for the common cases.

Author: TM3
Date: 2025-10-17
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, TypeVar, Union

from order_stream.core.exceptions import (
    DuplicateKeyError,
    EmptyAggregationError,
    InvalidComparisonError,
)

T = TypeVar('T')
K = TypeVar('K')
R = TypeVar('R')


def identity(item):
    return item


class Aggregation(ABC, Generic[T, R]):
    """A reduction of a collection to a single result"""

    name = "aggregation"

    @abstractmethod
    def apply(self, items: Iterable[T]) -> R:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Count(Aggregation):
    name = "count"

    def apply(self, items):
        return sum(1 for _ in items)


class ToList(Aggregation):
    name = "to_list"

    def apply(self, items):
        return list(items)


class Sum(Aggregation):
    """Sum of projection(item); empty input gives start"""

    name = "sum"

    def __init__(self, projection: Callable[[Any], Any] = identity, start: Any = 0):
        self.projection = projection
        self.start = start

    def apply(self, items):
        return sum((self.projection(item) for item in items), self.start)


class Average(Aggregation):
    """Arithmetic mean of projection(item)"""

    name = "average"

    def __init__(self, projection: Callable[[Any], Any] = identity):
        self.projection = projection

    def apply(self, items):
        total = 0
        count = 0
        for item in items:
            total += self.projection(item)
            count += 1
        if count == 0:
            raise EmptyAggregationError(self.name)
        return total / count


class _ExtremeBy(Aggregation):
    """Shared scan for MinBy / MaxBy"""

    def __init__(self, key: Callable[[Any], Any], skip_missing: bool = False):
        self.key = key
        self.skip_missing = skip_missing

    @staticmethod
    @abstractmethod
    def _better(candidate, current) -> bool:
        """True when candidate strictly beats current"""

    def apply(self, items):
        best = None
        best_key = None
        found = False
        for item in items:
            value = self.key(item)
            if value is None:
                if self.skip_missing:
                    continue
                raise InvalidComparisonError(f"{self.name} key is missing on {item!r}")
            try:
                # Strict comparison: on a tie the earlier element stays
                if not found or self._better(value, best_key):
                    best, best_key, found = item, value, True
            except TypeError as e:
                raise InvalidComparisonError(f"{self.name} keys are not comparable: {e}") from e
        if not found:
            raise EmptyAggregationError(self.name)
        return best


class MinBy(_ExtremeBy):
    name = "min_by"

    @staticmethod
    def _better(candidate, current) -> bool:
        return candidate < current


class MaxBy(_ExtremeBy):
    name = "max_by"

    @staticmethod
    def _better(candidate, current) -> bool:
        return candidate > current


@dataclass
class SummaryStatistics:
    """
    count / total / minimum / maximum of a numeric projection

    minimum and maximum are None for an empty input, and reading average
    then raises EmptyAggregationError.
    """
    count: int
    total: Any
    minimum: Optional[Any]
    maximum: Optional[Any]

    @property
    def average(self):
        if self.count == 0:
            raise EmptyAggregationError("average")
        return self.total / self.count

    def to_dict(self) -> dict:
        """Plain dict with floats (average is None for an empty summary)"""
        def as_float(value):
            return float(value) if value is not None else None

        return {
            'count': self.count,
            'total': as_float(self.total),
            'minimum': as_float(self.minimum),
            'maximum': as_float(self.maximum),
            'average': as_float(self.average) if self.count else None,
        }


class SummaryStats(Aggregation):
    name = "summary_statistics"

    def __init__(self, projection: Callable[[Any], Any] = identity, start: Any = 0):
        self.projection = projection
        self.start = start

    def apply(self, items) -> SummaryStatistics:
        count = 0
        total = self.start
        minimum = None
        maximum = None
        for item in items:
            value = self.projection(item)
            count += 1
            total += value
            if minimum is None or value < minimum:
                minimum = value
            if maximum is None or value > maximum:
                maximum = value
        return SummaryStatistics(count=count, total=total, minimum=minimum, maximum=maximum)


class Mapping(Aggregation):
    """Project each element, then reduce the projections downstream"""

    name = "mapping"

    def __init__(self, projection: Callable[[Any], Any], downstream: Optional[Aggregation] = None):
        self.projection = projection
        self.downstream = downstream or ToList()

    def apply(self, items):
        return self.downstream.apply(self.projection(item) for item in items)


class AndThen(Aggregation):
    """Run a downstream strategy, then transform its result"""

    name = "and_then"

    def __init__(self, downstream: Aggregation, finisher: Callable[[Any], Any]):
        self.downstream = downstream
        self.finisher = finisher

    def apply(self, items):
        return self.finisher(self.downstream.apply(items))


class GroupThenReduce(Aggregation):
    """
    Partition by key and reduce each group

    Keys appear in first-seen order; each group keeps source order before
    it reaches the downstream strategy. Groups are never empty, so a
    downstream Average or MaxBy cannot fail for lack of elements.
    """

    name = "group_by"

    def __init__(self, key: Callable[[Any], Any], downstream: Optional[Aggregation] = None):
        self.key = key
        self.downstream = downstream

    def apply(self, items) -> Dict[Any, Any]:
        groups: Dict[Any, List[Any]] = {}
        for item in items:
            groups.setdefault(self.key(item), []).append(item)
        if self.downstream is None:
            return groups
        return {key: self.downstream.apply(members) for key, members in groups.items()}


# ============================================================================
# Keyed collection
# ============================================================================

class MergeStrategy(str, Enum):
    """What to_map does when two elements produce the same key"""
    ERROR = "error"
    LAST_WINS = "last_wins"
    FIRST_WINS = "first_wins"


MergeFunction = Callable[[Any, Any], Any]


def _keep_by(key: Callable[[Any], Any], better: Callable[[Any, Any], bool], name: str) -> MergeFunction:
    def merge(existing, incoming):
        incoming_key, existing_key = key(incoming), key(existing)
        if incoming_key is None or existing_key is None:
            raise InvalidComparisonError(f"{name} key is missing on {existing!r} or {incoming!r}")
        try:
            return incoming if better(incoming_key, existing_key) else existing
        except TypeError as e:
            raise InvalidComparisonError(f"{name} keys are not comparable: {e}") from e
    return merge


def keep_max_by(key: Callable[[Any], Any]) -> MergeFunction:
    """Merge function keeping the value with the larger key (existing wins ties)"""
    return _keep_by(key, lambda a, b: a > b, "keep_max_by")


def keep_min_by(key: Callable[[Any], Any]) -> MergeFunction:
    """Merge function keeping the value with the smaller key (existing wins ties)"""
    return _keep_by(key, lambda a, b: a < b, "keep_min_by")


def to_map(
    items: Iterable[T],
    key: Callable[[T], K],
    value: Callable[[T], Any] = identity,
    merge: Union[MergeStrategy, MergeFunction] = MergeStrategy.ERROR,
) -> Dict[K, Any]:
    """
    Collect items into a dict of key(item) -> value(item)

    Raises:
        DuplicateKeyError: a key repeats and merge is MergeStrategy.ERROR
    """
    result: Dict[K, Any] = {}
    for item in items:
        k = key(item)
        v = value(item)
        if k not in result:
            result[k] = v
        elif merge == MergeStrategy.ERROR:
            raise DuplicateKeyError(k)
        elif merge == MergeStrategy.LAST_WINS:
            result[k] = v
        elif merge == MergeStrategy.FIRST_WINS:
            continue
        else:
            result[k] = merge(result[k], v)
    return result


# ============================================================================
# Helpers
# ============================================================================

def aggregate(items: Iterable[T], aggregation: Aggregation) -> Any:
    return aggregation.apply(items)


def count(items: Iterable[Any]) -> int:
    return Count().apply(items)


def sum_of(items: Iterable[T], projection: Callable[[T], Any] = identity, start: Any = 0) -> Any:
    return Sum(projection, start).apply(items)


def average(items: Iterable[T], projection: Callable[[T], Any] = identity) -> Any:
    return Average(projection).apply(items)


def min_by(items: Iterable[T], key: Callable[[T], Any], skip_missing: bool = False) -> T:
    return MinBy(key, skip_missing).apply(items)


def max_by(items: Iterable[T], key: Callable[[T], Any], skip_missing: bool = False) -> T:
    return MaxBy(key, skip_missing).apply(items)


def summary_statistics(
    items: Iterable[T],
    projection: Callable[[T], Any] = identity,
    start: Any = 0,
) -> SummaryStatistics:
    return SummaryStats(projection, start).apply(items)


def group_by(
    items: Iterable[T],
    key: Callable[[T], K],
    downstream: Optional[Aggregation] = None,
) -> Dict[K, Any]:
    return GroupThenReduce(key, downstream).apply(items)


def reduce_items(items: Iterable[T], fn: Callable[[R, T], R], initial: R) -> R:
    """Left fold: fn(...fn(fn(initial, a), b)...)"""
    return reduce(fn, items, initial)
