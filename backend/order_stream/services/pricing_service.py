"""
Pricing Service
Explicit, in-place price changes

Queries never change prices. Discounting a selection is two steps:

    toys = service.products_in_category("Toys")
    apply_discount(toys, Decimal("0.9"))

Author: TM3
Date: 2025-10-17
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Union

from order_stream.core.config import settings
from order_stream.domain.product import Product

logger = logging.getLogger(__name__)


def apply_discount(
    products: Iterable[Product],
    factor: Optional[Union[Decimal, int, float, str]] = None,
) -> List[Product]:
    """
    Multiply each product's price by factor, in place

    Args:
        products: Products to reprice (mutated)
        factor: Price multiplier, e.g. Decimal("0.9") for 10% off.
            Defaults to settings.DISCOUNT_FACTOR.

    Returns:
        The same products, now repriced

    Raises:
        ValueError: factor is negative
    """
    factor = settings.DISCOUNT_FACTOR if factor is None else Decimal(str(factor))
    if factor < 0:
        raise ValueError(f"Discount factor must be non-negative, got {factor}")

    changed = []
    for product in products:
        new_price = (product.price * factor).quantize(settings.MONEY_QUANTUM, rounding=ROUND_HALF_UP)
        logger.debug(f"Product {product.id}: {product.price} -> {new_price}")
        product.price = new_price
        changed.append(product)

    logger.info(f"Applied discount factor {factor} to {len(changed)} products")
    return changed
