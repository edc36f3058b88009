"""
Ordering and top-K selection

Sorting is stable in both directions: elements with equal keys keep their
source order. An element whose key is None is placed according to a
NullsPolicy instead of being handed to the comparison, which would fail
(None < date) or misorder silently.

Author: TM3
Date: 2025-10-17
"""
from enum import Enum
from typing import Any, Callable, Iterable, List, TypeVar

from order_stream.core.exceptions import InvalidComparisonError

T = TypeVar('T')


class NullsPolicy(str, Enum):
    """Where elements with a missing (None) sort key go"""
    LAST = "last"
    FIRST = "first"
    ERROR = "error"


def sort_by(
    items: Iterable[T],
    key: Callable[[T], Any],
    descending: bool = False,
    nulls: NullsPolicy = NullsPolicy.LAST,
) -> List[T]:
    """
    Stable sort of items by key

    Args:
        items: Elements to sort (not modified)
        key: Sort key extractor; may return None
        descending: Reverse the key order (ties still keep source order)
        nulls: Placement of None keys, independent of direction

    Returns:
        New sorted list

    Raises:
        InvalidComparisonError: a None key under NullsPolicy.ERROR, or keys
            that cannot be compared with each other
    """
    present = []
    missing = []
    for item in items:
        value = key(item)
        if value is None:
            if nulls == NullsPolicy.ERROR:
                raise InvalidComparisonError(f"Sort key is missing on {item!r}")
            missing.append(item)
        else:
            present.append((value, item))

    try:
        # sorted() keeps equal elements in input order even with reverse=True
        ordered = [item for _, item in sorted(present, key=lambda pair: pair[0], reverse=descending)]
    except TypeError as e:
        raise InvalidComparisonError(f"Sort keys are not comparable: {e}") from e

    if nulls == NullsPolicy.FIRST:
        return missing + ordered
    return ordered + missing


def top_k(
    items: Iterable[T],
    k: int,
    key: Callable[[T], Any],
    descending: bool = False,
    nulls: NullsPolicy = NullsPolicy.LAST,
) -> List[T]:
    """
    The first k elements after a full stable sort

    Returns min(k, len(items)) elements; k == 0 gives an empty list.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    return sort_by(items, key, descending=descending, nulls=nulls)[:k]
