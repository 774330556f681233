import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import settings

logger = logging.getLogger(__name__)


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def get_report_date_str(day: Optional[date] = None, sep: str = "/") -> str:
    """Returns a French-style day string, e.g. '05/03/2024' (or '05-03-2024' with sep='-')."""
    day = day or date.today()
    return day.strftime(f"%d{sep}%m{sep}%Y")


def month_label(month: int) -> str:
    """Abbreviated month name for a 1-based month number."""
    return settings.MONTH_LABELS[month - 1]


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Moves (year, month) by `offset` calendar months, crossing year boundaries."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def load_csv(file_path: Path, dtype: Optional[dict] = None) -> pd.DataFrame | None:
    """
    CSV loader with an encoding fallback.
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1, which reads any byte (accents from older spreadsheet exports).
    """
    try:
        return pd.read_csv(file_path, encoding="utf-8-sig", dtype=dtype)

    except UnicodeDecodeError:
        logger.info(
            f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(file_path, encoding="latin-1", dtype=dtype)
        except (OSError, ValueError) as e_latin1:
            logger.error(
                f"Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.warning(f"File not found at {file_path}, skipping.")
        return None

    except (OSError, ValueError) as e_general:
        # EmptyDataError is a ValueError subclass.
        logger.error(
            f"An unexpected error occurred while reading {file_path.name}. Reason: {e_general}"
        )
        return None
