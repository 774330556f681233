import logging
from typing import Sequence

import pandas as pd

from .. import utils
from ..aggregator import aggregate, in_month
from ..schemas import HeatmapCell, Invoice, Product

logger = logging.getLogger(__name__)


def build_heatmap(
    products: Sequence[Product], invoices: Sequence[Invoice], selected_year: int
) -> list[HeatmapCell]:
    """
    One cell per (product, month) of `selected_year`, products in catalog order and
    months January first within each product.

    Intensity is the cell quantity divided by the largest quantity of the whole grid
    (a single global maximum, not per product or per month); 0 when that maximum is 0.
    """
    raw_cells = []
    max_quantity = 0.0
    for product in products:
        for month in range(1, 13):
            totals = aggregate(invoices, product.name, in_month(selected_year, month))
            max_quantity = max(max_quantity, totals.quantity)
            raw_cells.append((utils.month_label(month), product.name, totals))

    logger.debug(f"Heatmap {selected_year}: {len(raw_cells)} cells, max quantity {max_quantity}.")
    return [
        HeatmapCell(
            month=month,
            product_name=name,
            quantity=totals.quantity,
            value=totals.value,
            intensity=totals.quantity / max_quantity if max_quantity > 0 else 0,
        )
        for month, name, totals in raw_cells
    ]


def heatmap_to_frame(cells: Sequence[HeatmapCell], column: str = "quantity") -> pd.DataFrame:
    """
    Pivots cells into a product x month table (rows in catalog order, months in
    calendar order), the shape a heatmap renderer or a spreadsheet expects.
    """
    if not cells:
        return pd.DataFrame()

    df = pd.DataFrame([cell.model_dump() for cell in cells])
    product_order = list(dict.fromkeys(df["product_name"]))
    month_order = list(dict.fromkeys(df["month"]))
    # Catalog names are not guaranteed unique; keep the first cell of a duplicate.
    table = df.pivot_table(
        index="product_name", columns="month", values=column, aggfunc="first"
    )
    return table.reindex(index=product_order, columns=month_order)
