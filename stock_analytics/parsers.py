import json
import logging
from pathlib import Path

import pandas as pd

from .utils import load_csv

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = ["id", "name", "category", "stock", "purchasePrice", "unit"]
INVOICE_LINE_COLUMNS = ["invoice_id", "date", "description", "quantity", "total"]

# Spreadsheet exports are not consistent about headers; map them onto ours.
COLUMN_ALIASES = {
    "purchase_price": "purchasePrice",
    "invoiceId": "invoice_id",
    "invoice": "invoice_id",
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    return df.rename(columns=COLUMN_ALIASES)


def _to_records(df: pd.DataFrame) -> list[dict]:
    """DataFrame rows as plain dicts, with NaN turned into None for pydantic."""
    clean = df.astype(object).where(df.notna(), None)
    return [{str(k): v for k, v in row.items()} for row in clean.to_dict("records")]


def _load_json(path: Path) -> list[dict] | None:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"File not found at {path}, skipping.")
        return None
    except (OSError, ValueError) as e:
        logger.error(f"Could not read {path.name}. Reason: {e}")
        return None

    if not isinstance(data, list):
        logger.error(f"{path.name} must contain a JSON array, got {type(data).__name__}.")
        return None
    return data


def parse_products_report(path: Path) -> list[dict] | None:
    """
    Loads the product catalog. CSV columns: id, name, category, stock, purchasePrice, unit
    (unit optional). A .json file holding an array of product objects is accepted too.
    """
    if path.suffix.lower() == ".json":
        return _load_json(path)

    df = load_csv(path, dtype={"id": str})
    if df is None:
        return None

    df = _normalize_columns(df)
    missing = [c for c in PRODUCT_COLUMNS if c not in df.columns and c != "unit"]
    if missing:
        logger.error(f"{path.name} is missing columns: {', '.join(missing)}")
        return None

    df = df.reindex(columns=PRODUCT_COLUMNS)
    logger.info(f"✅ Parsed {len(df)} products from {path.name}.")
    return _to_records(df)


def parse_invoices_report(path: Path) -> list[dict] | None:
    """
    Loads the sales ledger.

    CSV files are in long format, one line item per row:
    invoice_id, date, description, quantity, total. Rows are grouped back into invoices
    by invoice_id (first-seen order, items in file order). A row with an empty
    description keeps the invoice but adds no item.

    A .json file holding an array of nested invoice objects is accepted too.
    """
    if path.suffix.lower() == ".json":
        return _load_json(path)

    df = load_csv(path, dtype={"invoice_id": str, "description": str})
    if df is None:
        return None

    df = _normalize_columns(df)
    missing = [c for c in INVOICE_LINE_COLUMNS if c not in df.columns]
    if missing:
        logger.error(f"{path.name} is missing columns: {', '.join(missing)}")
        return None

    invoices = group_invoice_lines(df[INVOICE_LINE_COLUMNS])
    logger.info(f"✅ Parsed {len(invoices)} invoices ({len(df)} lines) from {path.name}.")
    return invoices


def group_invoice_lines(df: pd.DataFrame) -> list[dict]:
    """
    Folds long-format line rows back into nested invoice records.

    Rows without an invoice_id cannot be grouped; each becomes its own invoice
    with an id built from its CSV line number ("line-<n>").
    """
    df = df.copy()
    blank_ids = df["invoice_id"].isna() | (df["invoice_id"].astype(str).str.strip() == "")
    if blank_ids.any():
        logger.warning(
            f"⚠️ {int(blank_ids.sum())} ledger rows have no invoice_id; "
            "each is kept as a separate invoice."
        )
        # +2: header line and 1-based numbering.
        df.loc[blank_ids, "invoice_id"] = [f"line-{i + 2}" for i in df.index[blank_ids]]

    invoices = []
    for invoice_id, lines in df.groupby("invoice_id", sort=False):
        items = [
            {
                "description": row["description"],
                "quantity": row["quantity"] or 0,
                "total": row["total"] or 0,
            }
            for row in _to_records(lines)
            if row["description"] is not None
        ]
        invoices.append(
            {"id": str(invoice_id), "date": lines["date"].iloc[0], "items": items}
        )
    return invoices
