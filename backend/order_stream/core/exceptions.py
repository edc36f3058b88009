"""
Query errors

Every error raised by the engine derives from QueryError so callers can
handle a failed query without catching unrelated exceptions.

Author: TM3
Date: 2025-10-17
"""
from typing import Any, Optional


class QueryError(Exception):
    """Base class for errors raised while evaluating a query"""


class EmptyAggregationError(QueryError):
    """average / min_by / max_by requested over zero elements"""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Cannot compute {operation} of an empty collection")


class DuplicateKeyError(QueryError):
    """Key collision while collecting into a mapping with no merge strategy"""

    def __init__(self, key: Any, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"Duplicate key: {key!r}")


class MissingReferenceError(QueryError):
    """
    An order references a customer or product that is not in the snapshot

    Attributes:
        order_id: Order holding the dangling reference
        entity: 'customer' or 'product'
        reference_id: The id that could not be resolved
    """

    def __init__(self, order_id: int, entity: str, reference_id: int):
        self.order_id = order_id
        self.entity = entity
        self.reference_id = reference_id
        super().__init__(
            f"Order {order_id} references missing {entity} {reference_id}"
        )


class InvalidComparisonError(QueryError):
    """Sort key absent (or not comparable) and no policy covers it"""
