from typing import Optional, Sequence

from .. import settings
from ..aggregator import aggregate
from ..schemas import Invoice, Product, SummaryStats


def build_summary(
    products: Sequence[Product],
    invoices: Sequence[Invoice],
    product_filter: str = settings.ALL_PRODUCTS,
) -> SummaryStats:
    """
    Global KPIs over the whole invoice history, for the whole catalog or a single product id.

    Unlike the distribution and stock evolution views, remaining stock is NOT clamped
    per product here: overselling a product lowers `total_remaining_stock`.
    """
    if product_filter == settings.ALL_PRODUCTS:
        included = list(products)
    else:
        included = [p for p in products if p.id == product_filter]

    total_stock_initial = 0.0
    total_purchase_value = 0.0
    total_sales_value = 0.0
    total_quantity_sold = 0.0
    total_remaining_stock = 0.0
    dormant_products = 0

    for product in included:
        total_stock_initial += product.stock
        total_purchase_value += product.stock * product.purchase_price

        sold = aggregate(invoices, product.name)
        total_quantity_sold += sold.quantity
        total_sales_value += sold.value
        total_remaining_stock += unclamped_remaining_stock(product.stock, sold.quantity)

        if sold.quantity == 0:
            dormant_products += 1

    return SummaryStats(
        total_stock_initial=total_stock_initial,
        total_purchase_value=total_purchase_value,
        total_sales_value=total_sales_value,
        total_quantity_sold=total_quantity_sold,
        total_remaining_stock=total_remaining_stock,
        dormant_products=dormant_products,
        gross_margin=total_sales_value - total_purchase_value,
    )


def unclamped_remaining_stock(stock: float, sold: float) -> float:
    """Stock left after `sold` units; negative when more was sold than was in stock."""
    return stock - sold


def performance_status(stats: SummaryStats) -> Optional[str]:
    """'deficit' for a negative gross margin, 'positive' for a positive one, None at exactly zero."""
    if stats.gross_margin < 0:
        return "deficit"
    if stats.gross_margin > 0:
        return "positive"
    return None
