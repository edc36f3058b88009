"""
Pytest fixtures and configuration for order_stream tests

This file provides a small snapshot shared by all test modules:

    customers  1 Alice (tier 1), 2 Bob (tier 2), 3 Carol (tier 2), 4 Dan (tier 3, no orders)
    products   1 Clean Code   Books 120      5 SICP      Books 150
               2 Refactoring  Books  90      6 Puzzle    Toys   30
               3 Lego Set     Toys   50      7 Stroller  Baby  300
               4 Rattle       Baby   15
    orders     1 2021-03-15 Alice {1, 2}     4 2021-02-20 Carol {4, 5, 7}
               2 2021-03-10 Bob   {2}        5 2021-03-15 Carol {2, 6}
               3 2021-02-05 Bob   {3, 4}     6 2021-04-02 Alice {7}

Author: TM3
Date: 2025-10-17
"""
import pytest
from datetime import date
from decimal import Decimal

from order_stream.domain.order import Customer, Order
from order_stream.domain.product import Product
from order_stream.query.relation_index import RelationIndex
from order_stream.repositories.snapshot_repository import Snapshot
from order_stream.services.order_query_service import OrderQueryService


@pytest.fixture
def customers():
    return [
        Customer(id=1, name="Alice", tier=1),
        Customer(id=2, name="Bob", tier=2),
        Customer(id=3, name="Carol", tier=2),
        Customer(id=4, name="Dan", tier=3),
    ]


@pytest.fixture
def products():
    """
    Fresh products for each test

    Scope: function (prices may be mutated by discount tests)
    """
    return [
        Product(id=1, name="Clean Code", category="Books", price=Decimal("120")),
        Product(id=2, name="Refactoring", category="Books", price=Decimal("90")),
        Product(id=3, name="Lego Set", category="Toys", price=Decimal("50")),
        Product(id=4, name="Rattle", category="Baby", price=Decimal("15")),
        Product(id=5, name="SICP", category="Books", price=Decimal("150")),
        Product(id=6, name="Puzzle", category="Toys", price=Decimal("30")),
        Product(id=7, name="Stroller", category="Baby", price=Decimal("300")),
    ]


@pytest.fixture
def orders():
    return [
        Order(id=1, order_date=date(2021, 3, 15), delivery_date=date(2021, 3, 20),
              status="DELIVERED", customer_id=1, product_ids=[1, 2]),
        Order(id=2, order_date=date(2021, 3, 10), delivery_date=None,
              status="NEW", customer_id=2, product_ids=[2]),
        Order(id=3, order_date=date(2021, 2, 5), delivery_date=date(2021, 2, 10),
              status="DELIVERED", customer_id=2, product_ids=[3, 4]),
        Order(id=4, order_date=date(2021, 2, 20), delivery_date=None,
              status="PENDING", customer_id=3, product_ids=[4, 5, 7]),
        Order(id=5, order_date=date(2021, 3, 15), delivery_date=date(2021, 3, 18),
              status="DELIVERED", customer_id=3, product_ids=[2, 6]),
        Order(id=6, order_date=date(2021, 4, 2), delivery_date=None,
              status="NEW", customer_id=1, product_ids=[7]),
    ]


@pytest.fixture
def snapshot(customers, orders, products):
    return Snapshot(customers=customers, orders=orders, products=products)


@pytest.fixture
def index(customers, orders, products):
    return RelationIndex.build(customers, orders, products)


@pytest.fixture
def service(snapshot):
    return OrderQueryService(snapshot)
