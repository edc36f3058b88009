"""
Unit tests for RelationIndex

Author: TM3
Date: 2025-10-17
"""
import pytest
from datetime import date

from order_stream.core.exceptions import DuplicateKeyError, MissingReferenceError
from order_stream.domain.order import Customer, Order
from order_stream.query.relation_index import RelationIndex


class TestRelationIndexBuild:
    """Test the lookup tables produced by RelationIndex.build"""

    def test_orders_by_customer(self, index):
        assert [o.id for o in index.orders_by_customer[1]] == [1, 6]
        assert [o.id for o in index.orders_by_customer[2]] == [2, 3]
        assert [o.id for o in index.orders_by_customer[3]] == [4, 5]

    def test_customer_without_orders_maps_to_empty_list(self, index, customers):
        assert index.orders_by_customer[4] == []
        assert index.orders_of(customers[3]) == []

    def test_orders_by_product(self, index):
        """Test each product maps to every order containing it, once each"""
        assert [o.id for o in index.orders_by_product[2]] == [1, 2, 5]
        assert [o.id for o in index.orders_by_product[4]] == [3, 4]
        assert [o.id for o in index.orders_by_product[7]] == [4, 6]

    def test_products_by_order_sorted_by_id(self, index):
        assert [p.id for p in index.products_by_order[4]] == [4, 5, 7]
        assert [p.id for p in index.products_by_order[2]] == [2]

    def test_customer_of(self, index, orders):
        assert index.customer_of(orders[3]).name == "Carol"

    def test_products_of_order_outside_snapshot(self, index):
        """Test an order not in the snapshot is resolved against the index"""
        extra = Order(id=99, order_date=date(2021, 5, 1), status="NEW", customer_id=1, product_ids=[6, 3])

        assert [p.id for p in index.products_of(extra)] == [3, 6]

    def test_orders_containing_unknown_product_is_empty(self, index, products):
        product = products[0].model_copy(update={'id': 500})

        assert index.orders_containing(product) == []


class TestRelationIndexIntegrity:
    """Test integrity violations are raised, not dropped"""

    def test_missing_customer_raises(self, customers, products):
        orders = [Order(id=1, order_date=date(2021, 3, 1), status="NEW", customer_id=42, product_ids=[1])]

        with pytest.raises(MissingReferenceError) as exc_info:
            RelationIndex.build(customers, orders, products)

        assert exc_info.value.order_id == 1
        assert exc_info.value.entity == 'customer'
        assert exc_info.value.reference_id == 42

    def test_missing_product_raises(self, customers, products):
        orders = [Order(id=8, order_date=date(2021, 3, 1), status="NEW", customer_id=1, product_ids=[1, 77])]

        with pytest.raises(MissingReferenceError) as exc_info:
            RelationIndex.build(customers, orders, products)

        assert exc_info.value.entity == 'product'
        assert exc_info.value.reference_id == 77

    def test_duplicate_entity_id_raises(self, orders, products):
        customers = [Customer(id=1, name="Alice", tier=1), Customer(id=1, name="Alias", tier=2)]

        with pytest.raises(DuplicateKeyError):
            RelationIndex.build(customers, orders, products)

    def test_missing_product_on_external_order(self, index):
        extra = Order(id=99, order_date=date(2021, 5, 1), status="NEW", customer_id=1, product_ids=[1000])

        with pytest.raises(MissingReferenceError):
            index.products_of(extra)
