"""
Repository Layer - Snapshot Access

Repositories hand the engine fully loaded customers, orders and products.
Where the data comes from is their concern, not the engine's.

Author: TM3
Date: 2025-10-17
"""
from order_stream.repositories.snapshot_repository import (
    Snapshot,
    SnapshotRepository,
    InMemorySnapshotRepository,
    JsonSnapshotRepository,
    load_snapshot,
)

__all__ = [
    'Snapshot',
    'SnapshotRepository',
    'InMemorySnapshotRepository',
    'JsonSnapshotRepository',
    'load_snapshot',
]
