from typing import Sequence

from .. import settings
from ..schemas import Product


def product_options(products: Sequence[Product]) -> list[tuple[str, str]]:
    """(value, label) pairs for the product picker, "all" first, then catalog order."""
    options = [(settings.ALL_PRODUCTS, settings.ALL_PRODUCTS_LABEL)]
    options.extend((p.id, f"{p.name} ({p.category})") for p in products)
    return options
