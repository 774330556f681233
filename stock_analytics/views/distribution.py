import logging
from typing import Literal, Sequence

from .. import settings
from ..aggregator import aggregate
from ..schemas import DistributionSlice, Invoice, Product
from .stock_evolution import clamped_remaining_stock

logger = logging.getLogger(__name__)

DistributionMode = Literal["sales", "stock"]


def build_distribution(
    products: Sequence[Product],
    invoices: Sequence[Invoice],
    mode: DistributionMode = "sales",
) -> list[DistributionSlice]:
    """
    Share of each product in total sales value ("sales") or in the purchase value
    of the stock left on hand ("stock"), over the entire invoice history.

    Products with a value <= 0 are dropped. Slices keep catalog order and take
    their color from the palette by position, so colors do not follow magnitude.
    """
    if mode not in ("sales", "stock"):
        raise ValueError(f"Unknown distribution mode: {mode!r}")

    kept = []
    for product in products:
        totals = aggregate(invoices, product.name)
        if mode == "sales":
            value = totals.value
        else:
            remaining = clamped_remaining_stock(product.stock, totals.quantity)
            value = remaining * product.purchase_price
        if value > 0:
            kept.append((product.name, value))

    grand_total = sum(value for _, value in kept)
    palette = settings.COLOR_PALETTE

    slices = [
        DistributionSlice(
            label=label,
            value=value,
            color=palette[index % len(palette)],
            percentage=(value / grand_total) * 100 if grand_total > 0 else 0,
        )
        for index, (label, value) in enumerate(kept)
    ]
    logger.debug(f"{mode} distribution: {len(slices)} of {len(products)} products kept.")
    return slices


def distribution_total(slices: Sequence[DistributionSlice]) -> float:
    """Sum of slice values (the figure shown in the middle of the donut)."""
    return sum(s.value for s in slices)
