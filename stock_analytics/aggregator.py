"""
Line-item matching and summing primitives shared by every view builder.

Products and line items are joined on the product's display name, not on its id:
a renamed product no longer matches the invoices written under its old name.
"""

from typing import Callable, Iterable, Optional, Sequence

from .schemas import Invoice, LineItem, Product, Totals

InvoicePredicate = Callable[[Invoice], bool]


def describes(item: LineItem, product_name: Optional[str]) -> bool:
    """Exact, case-sensitive comparison of the line description with a product name."""
    return product_name is not None and item.description == product_name


def matches(item: LineItem, product: Product) -> bool:
    return describes(item, product.name)


def in_month(year: int, month: int) -> InvoicePredicate:
    """Predicate selecting invoices dated in the given calendar month (1-based)."""

    def predicate(invoice: Invoice) -> bool:
        return invoice.date.year == year and invoice.date.month == month

    return predicate


def invoices_in_month(
    invoices: Iterable[Invoice], year: int, month: int
) -> list[Invoice]:
    predicate = in_month(year, month)
    return [invoice for invoice in invoices if predicate(invoice)]


def aggregate(
    invoices: Sequence[Invoice],
    product_name: Optional[str],
    predicate: Optional[InvoicePredicate] = None,
) -> Totals:
    """
    Sums quantity and line total of every item described as `product_name`
    across the invoices accepted by `predicate` (the whole history when None).

    A `None` product name (e.g. an unknown product id) matches nothing.
    """
    quantity = 0.0
    value = 0.0
    if product_name is None:
        return Totals(quantity=quantity, value=value)

    for invoice in invoices:
        if predicate is not None and not predicate(invoice):
            continue
        for item in invoice.items:
            if describes(item, product_name):
                quantity += item.quantity
                value += item.total

    return Totals(quantity=quantity, value=value)


def find_product(products: Sequence[Product], product_id: Optional[str]) -> Optional[Product]:
    """First catalog entry with the given id, or None."""
    return next((p for p in products if p.id == product_id), None)


def available_years(invoices: Iterable[Invoice]) -> list[int]:
    """Distinct invoice years, most recent first."""
    return sorted({invoice.date.year for invoice in invoices}, reverse=True)
