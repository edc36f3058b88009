#!/usr/bin/env python3
"""
Run every catalog/order query against a JSON snapshot and print a report

Usage:
    python scripts/run_exercises.py                       # uses SNAPSHOT_PATH or data/sample_snapshot.json
    python scripts/run_exercises.py --snapshot my.json
    python scripts/run_exercises.py --discount            # also reprices Toys and shows the result

Author: TM3
Date: 2025-10-17
"""
import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from order_stream.core.config import get_settings
from order_stream.core.exceptions import EmptyAggregationError, QueryError
from order_stream.core.logging_config import configure_logging
from order_stream.query.materializer import to_dataframe, to_records
from order_stream.repositories.snapshot_repository import JsonSnapshotRepository
from order_stream.services.order_query_service import OrderQueryService
from order_stream.services.pricing_service import apply_discount

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT = Path(__file__).resolve().parent.parent / 'data' / 'sample_snapshot.json'

# Load environment variables before reading settings
env_path = Path(__file__).resolve().parent.parent / '.env'
load_dotenv(env_path)


def section(title: str):
    print()
    print("=" * 80)
    print(f"  {title}")
    print("=" * 80)


def run_report(service: OrderQueryService, day: date, year: int, month: int, tier: int,
               start: date, end: date):
    section("📚 Books priced above 100")
    print(to_dataframe(service.products_in_category_above("Books", 100)).to_string(index=False))

    section("👶 Orders with Baby products")
    for order in service.orders_with_category("Baby", distinct=True):
        print(f"  order {order.id} | {order.order_date} | customer {order.customer_id}")

    section(f"🏅 Products ordered by tier {tier} customers, {start} to {end}")
    for product in service.products_ordered_by_tier_between(tier, start, end):
        print(f"  {product.id:3d} | {product.category:10s} | {product.name}")

    section("💸 3 cheapest Books")
    for product in service.cheapest_in_category("Books"):
        print(f"  {product.name:30s} ${product.price}")

    section("🕒 3 most recent orders")
    for order in service.most_recent_orders():
        print(f"  order {order.id} | {order.order_date}")

    section(f"📅 Products ordered on {day}")
    for product in service.products_ordered_on(day):
        print(f"  {product.id:3d} | {product.name}")

    section(f"💰 Total for {year}-{month:02d}")
    print(f"  {service.total_for_month(year, month)}")

    section(f"📊 Average price on {day}")
    try:
        print(f"  {service.average_price_on(day):.2f}")
    except EmptyAggregationError:
        print("  (no orders that day)")

    section("📈 Books statistics")
    print(f"  {service.category_statistics('Books').to_dict()}")

    section("🧾 Product count per order")
    print(f"  {service.product_count_by_order()}")

    section("👥 Order ids per customer")
    print(f"  {service.order_ids_by_customer()}")

    section("🧮 Order totals")
    print(to_dataframe(service.order_totals()).to_string(index=False))

    section("🏷️  Product names by category")
    for category, names in service.product_names_by_category().items():
        print(f"  {category:10s} | {', '.join(names)}")

    section("💎 Most expensive product per category")
    for category, record in to_records(service.most_expensive_by_category()).items():
        print(f"  {category:10s} | {record['name']} (${record['price']:.2f})")


def main():
    parser = argparse.ArgumentParser(description='Run catalog/order queries against a snapshot')
    parser.add_argument('--snapshot', help='Path to snapshot JSON')
    parser.add_argument('--day', type=date.fromisoformat, default=date(2021, 3, 15),
                        help='Day for the per-day queries (YYYY-MM-DD)')
    parser.add_argument('--year', type=int, default=2021)
    parser.add_argument('--month', type=int, default=2)
    parser.add_argument('--tier', type=int, default=2)
    parser.add_argument('--start', type=date.fromisoformat, default=date(2021, 2, 1))
    parser.add_argument('--end', type=date.fromisoformat, default=date(2021, 4, 1))
    parser.add_argument('--discount', action='store_true', help='Apply the Toys discount after the report')
    parser.add_argument('--log-level', default=None)
    args = parser.parse_args()

    configure_logging(args.log_level)

    snapshot_path = args.snapshot or get_settings().SNAPSHOT_PATH or DEFAULT_SNAPSHOT

    try:
        service = OrderQueryService.from_repository(JsonSnapshotRepository(snapshot_path))
        run_report(service, args.day, args.year, args.month, args.tier, args.start, args.end)

        if args.discount:
            section("🧸 Toys after discount")
            for product in apply_discount(service.products_in_category("Toys")):
                print(f"  {product.name:30s} ${product.price}")
    except (QueryError, ValidationError) as e:
        logger.error(f"Query failed: {e}")
        sys.exit(1)
    except FileNotFoundError:
        logger.error(f"Snapshot not found: {snapshot_path}")
        sys.exit(1)

    print("\n✅ Done")


if __name__ == "__main__":
    main()
