"""
Unit tests for grouping and reduction strategies

Author: TM3
Date: 2025-10-17
"""
import pytest
from collections import Counter
from decimal import Decimal

from order_stream.core.exceptions import (
    DuplicateKeyError,
    EmptyAggregationError,
    InvalidComparisonError,
)
from order_stream.domain.product import Product
from order_stream.query.aggregation import (
    AndThen,
    Average,
    Count,
    Mapping,
    MaxBy,
    MergeStrategy,
    Sum,
    _ExtremeBy,
    aggregate,
    average,
    count,
    group_by,
    keep_max_by,
    keep_min_by,
    max_by,
    min_by,
    reduce_items,
    sum_of,
    summary_statistics,
    to_map,
)


def _price(p):
    return p.price


class TestSumAndAverage:

    def test_average(self):
        assert average([100, 200, 300]) == 200

    def test_average_of_empty_raises(self):
        with pytest.raises(EmptyAggregationError):
            average([])

    def test_average_of_decimal_prices(self, products):
        books = [p for p in products if p.category == "Books"]

        assert average(books, _price) == Decimal("120")

    def test_sum_of_empty_is_start(self):
        assert sum_of([]) == 0
        assert sum_of([], _price, Decimal("0")) == Decimal("0")

    def test_sum_of_projection(self, products):
        assert sum_of(products, _price) == Decimal("755")

    def test_count(self, products):
        assert count(products) == 7
        assert count([]) == 0

    def test_strategies_through_single_interface(self, products):
        """Test every strategy is applied the same way"""
        strategies = [Count(), Sum(_price), Average(_price), MaxBy(_price)]

        results = [aggregate(products, s) for s in strategies]

        assert results[0] == 7
        assert results[1] == Decimal("755")
        assert results[2] == Decimal("755") / 7
        assert results[3].id == 7


class TestSummaryStatistics:

    def test_summary(self, products):
        books = [p for p in products if p.category == "Books"]

        stats = summary_statistics(books, _price)

        assert stats.count == 3
        assert stats.total == Decimal("360")
        assert stats.minimum == Decimal("90")
        assert stats.maximum == Decimal("150")
        assert stats.average == Decimal("120")

    def test_count_and_average_consistent(self):
        values = [1.5, 2.25, 10.0, 3.3]

        stats = summary_statistics(values)

        assert stats.count == len(values)
        assert stats.total / stats.count == pytest.approx(stats.average)

    def test_empty_summary(self):
        stats = summary_statistics([])

        assert stats.count == 0
        assert stats.total == 0
        assert stats.minimum is None
        assert stats.maximum is None
        with pytest.raises(EmptyAggregationError):
            stats.average
        assert stats.to_dict()['average'] is None

    def test_to_dict_floats(self):
        stats = summary_statistics([Decimal("10"), Decimal("20")])

        assert stats.to_dict() == {
            'count': 2, 'total': 30.0, 'minimum': 10.0, 'maximum': 20.0, 'average': 15.0,
        }


class TestMinMaxBy:
    """Test extremes and their tie-break / missing-key policy"""

    def test_max_and_min(self, products):
        assert max_by(products, _price).id == 7
        assert min_by(products, _price).id == 4

    def test_first_encountered_wins_ties(self):
        a = Product(id=1, name="A", category="X", price=Decimal("10"))
        b = Product(id=2, name="B", category="X", price=Decimal("10"))

        assert max_by([a, b], _price) is a
        assert min_by([a, b], _price) is a
        assert max_by([b, a], _price) is b

    def test_empty_raises(self):
        with pytest.raises(EmptyAggregationError):
            max_by([], lambda v: v)
        with pytest.raises(EmptyAggregationError):
            min_by([], lambda v: v)

    def test_missing_key_raises(self, orders):
        with pytest.raises(InvalidComparisonError):
            max_by(orders, lambda o: o.delivery_date)

    def test_missing_key_skipped_on_request(self, orders):
        assert max_by(orders, lambda o: o.delivery_date, skip_missing=True).id == 1

    def test_extreme_by_is_abstract(self):
        with pytest.raises(TypeError):
            _ExtremeBy(_price)

    def test_all_missing_skipped_is_empty(self, orders):
        undelivered = [o for o in orders if o.delivery_date is None]

        with pytest.raises(EmptyAggregationError):
            min_by(undelivered, lambda o: o.delivery_date, skip_missing=True)


class TestGroupBy:

    def test_grouping_completeness(self, products):
        """Test every element lands in exactly its own group, once"""
        groups = group_by(products, lambda p: p.category)

        for product in products:
            assert groups[product.category].count(product) == 1
        merged = Counter(p.id for members in groups.values() for p in members)
        assert merged == Counter(p.id for p in products)

    def test_keys_first_seen_and_members_in_source_order(self, products):
        groups = group_by(products, lambda p: p.category)

        assert list(groups) == ["Books", "Toys", "Baby"]
        assert [p.id for p in groups["Books"]] == [1, 2, 5]

    def test_downstream_reduction(self, products):
        counts = group_by(products, lambda p: p.category, Count())
        names = group_by(products, lambda p: p.category, Mapping(lambda p: p.name))

        assert counts == {"Books": 3, "Toys": 2, "Baby": 2}
        assert names["Toys"] == ["Lego Set", "Puzzle"]

    def test_group_then_max_then_name(self, products):
        result = group_by(products, lambda p: p.category, AndThen(MaxBy(_price), lambda p: p.name))

        assert result == {"Books": "SICP", "Toys": "Lego Set", "Baby": "Stroller"}

    def test_mapping_with_downstream_sum(self, products):
        totals = group_by(products, lambda p: p.category, Mapping(_price, Sum()))

        assert totals == {"Books": Decimal("360"), "Toys": Decimal("80"), "Baby": Decimal("315")}

    def test_empty_input(self):
        assert group_by([], lambda v: v) == {}


class TestToMap:
    """Test key collision policies"""

    @pytest.fixture
    def collision(self):
        return [
            Product(id=1, name="cheap", category="A", price=Decimal("10")),
            Product(id=2, name="dear", category="A", price=Decimal("20")),
        ]

    def test_unique_keys(self, products):
        result = to_map(products, lambda p: p.id, lambda p: p.name)

        assert result[5] == "SICP"
        assert len(result) == 7

    def test_collision_without_merge_raises(self, collision):
        with pytest.raises(DuplicateKeyError) as exc_info:
            to_map(collision, lambda p: p.category)

        assert exc_info.value.key == "A"

    def test_max_by_category_merge(self, collision):
        result = to_map(collision, lambda p: p.category, merge=keep_max_by(_price))
        prices = to_map(collision, lambda p: p.category, _price, merge=max)

        assert result["A"].price == 20
        assert prices == {"A": 20}

    def test_max_merge_keeps_existing_on_tie(self):
        first = Product(id=1, name="first", category="A", price=Decimal("10"))
        second = Product(id=2, name="second", category="A", price=Decimal("10"))

        result = to_map([first, second], lambda p: p.category, merge=keep_max_by(_price))

        assert result["A"] is first

    def test_min_merge(self, collision):
        result = to_map(collision, lambda p: p.category, merge=keep_min_by(_price))

        assert result["A"].name == "cheap"

    def test_merge_with_missing_key_raises(self):
        rows = [{'c': 'A', 'v': None}, {'c': 'A', 'v': 3}]

        with pytest.raises(InvalidComparisonError):
            to_map(rows, lambda r: r['c'], merge=keep_max_by(lambda r: r['v']))

    def test_merge_with_incomparable_keys_raises(self):
        rows = [{'c': 'A', 'v': 1}, {'c': 'A', 'v': "x"}]

        with pytest.raises(InvalidComparisonError):
            to_map(rows, lambda r: r['c'], merge=keep_min_by(lambda r: r['v']))

    def test_last_and_first_wins(self, collision):
        last = to_map(collision, lambda p: p.category, lambda p: p.name, merge=MergeStrategy.LAST_WINS)
        first = to_map(collision, lambda p: p.category, lambda p: p.name, merge=MergeStrategy.FIRST_WINS)

        assert last == {"A": "dear"}
        assert first == {"A": "cheap"}


class TestReduce:

    def test_left_fold(self, products):
        total = reduce_items(products, lambda acc, p: acc + p.price, Decimal("0"))

        assert total == Decimal("755")

    def test_empty_returns_initial(self):
        assert reduce_items([], lambda acc, v: acc + v, 42) == 42
