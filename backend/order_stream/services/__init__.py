"""
Service Layer - exercise queries and explicit mutations

Author: TM3
Date: 2025-10-17
"""
from order_stream.services.order_query_service import OrderQueryService
from order_stream.services.pricing_service import apply_discount

__all__ = ['OrderQueryService', 'apply_discount']
