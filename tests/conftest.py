import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stock_analytics.schemas import Invoice, LineItem, Product


def make_invoice(invoice_id, day, *items):
    return Invoice(
        id=invoice_id,
        date=day,
        items=[LineItem(description=d, quantity=q, total=t) for d, q, t in items],
    )


@pytest.fixture
def products():
    return [
        Product(id="p1", name="Widget", category="Outils", stock=100, purchasePrice=10, unit="pièce"),
        Product(id="p2", name="Gadget", category="Outils", stock=5, purchasePrice=4),
        Product(id="p3", name="Dormant", category="Divers", stock=10, purchasePrice=2),
    ]


@pytest.fixture
def invoices():
    return [
        make_invoice("f1", date(2024, 3, 5), ("Widget", 20, 400), ("Gadget", 3, 30)),
        make_invoice("f2", date(2024, 3, 20), ("Gadget", 5, 50)),
        make_invoice("f3", date(2024, 7, 1), ("Widget", 10, 200), ("Unknown", 1, 9)),
        make_invoice("f4", date(2023, 12, 31), ("Widget", 2, 40)),
    ]
