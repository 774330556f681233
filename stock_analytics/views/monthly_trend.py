import logging
from typing import Sequence

from .. import settings, utils
from ..aggregator import describes, find_product, invoices_in_month
from ..schemas import Invoice, MonthlySalesPoint, Product

logger = logging.getLogger(__name__)


def build_monthly_trend(
    products: Sequence[Product],
    invoices: Sequence[Invoice],
    selected_year: int,
    selected_product: str = settings.ALL_PRODUCTS,
) -> list[MonthlySalesPoint]:
    """
    Twelve points (January first) of sold quantity, sales value and order count.

    With "all" every line item counts. With a product id only its line items count;
    an unknown id counts nothing. `orders_count` is the number of invoices dated in
    the month, whether or not any of their items passed the product filter.
    """
    count_everything = selected_product == settings.ALL_PRODUCTS
    product_name = None
    if not count_everything:
        product = find_product(products, selected_product)
        product_name = product.name if product else None

    points = []
    for month in range(1, 13):
        quantity = 0.0
        value = 0.0
        orders_count = 0
        for invoice in invoices_in_month(invoices, selected_year, month):
            for item in invoice.items:
                if count_everything or describes(item, product_name):
                    quantity += item.quantity
                    value += item.total
            orders_count += 1

        points.append(
            MonthlySalesPoint(
                month=utils.month_label(month),
                quantity=quantity,
                value=value,
                orders_count=orders_count,
            )
        )
    return points
