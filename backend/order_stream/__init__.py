"""
order_stream - in-memory query and aggregation engine

Queries a customers / orders / products snapshot through composable
collection operations instead of a store's native query language.

Author: TM3
Date: 2025-10-17
"""
__version__ = "1.0.0"
