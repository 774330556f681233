from typing import Sequence

from ..aggregator import aggregate
from ..schemas import Invoice, MarginRecord, Product


def build_margins(
    products: Sequence[Product], invoices: Sequence[Invoice]
) -> list[MarginRecord]:
    """Per-product gross margin on units sold, for products with positive sales. Catalog order."""
    records = []
    for product in products:
        totals = aggregate(invoices, product.name)
        if totals.value <= 0:
            continue
        purchase_value = totals.quantity * product.purchase_price
        records.append(
            MarginRecord(
                product_name=product.name,
                margin=totals.value - purchase_value,
                sales_value=totals.value,
                purchase_value=purchase_value,
                unit=product.unit,
            )
        )
    return records
