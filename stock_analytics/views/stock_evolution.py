import logging
from datetime import date
from typing import Optional, Sequence

from .. import settings, utils
from ..aggregator import aggregate, find_product, in_month
from ..schemas import Invoice, Product, StockEvolutionPoint

logger = logging.getLogger(__name__)


def build_stock_evolution(
    products: Sequence[Product],
    invoices: Sequence[Invoice],
    product_id: Optional[str],
    today: Optional[date] = None,
) -> list[StockEvolutionPoint]:
    """
    Month-by-month sales against the product's current stock, over the last
    `STOCK_EVOLUTION_MONTHS` months ending with the current one (oldest first).

    The catalog only holds a stock snapshot, so every month reports the same
    initial stock. Remaining stock is clamped at zero.

    Returns an empty list when no concrete product is selected (or the id is
    unknown) so the caller can ask the user to pick one.
    """
    if not product_id or product_id == settings.ALL_PRODUCTS:
        return []

    product = find_product(products, product_id)
    if product is None:
        logger.debug(f"No product with id '{product_id}' for stock evolution.")
        return []

    today = today or date.today()
    points = []
    for offset in range(settings.STOCK_EVOLUTION_MONTHS - 1, -1, -1):
        year, month = utils.shift_month(today.year, today.month, -offset)
        sold = aggregate(invoices, product.name, in_month(year, month)).quantity
        points.append(
            StockEvolutionPoint(
                month=utils.month_label(month),
                initial_stock=product.stock,
                sold=sold,
                remaining=clamped_remaining_stock(product.stock, sold),
            )
        )
    return points


def clamped_remaining_stock(stock: float, sold: float) -> float:
    """Stock left after `sold` units, never below zero. See `summary.unclamped_remaining_stock`."""
    return max(0.0, stock - sold)
