import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date
from pathlib import Path
from typing import Callable, Optional

import pandas as pd
import requests

from . import settings, utils
from .report import report_filename
from .schemas import AnalysisResult
from .views.heatmap import heatmap_to_frame

logger = logging.getLogger(__name__)

# View name -> AnalysisResult attribute holding a list of rows.
TABULAR_VIEWS = [
    "stock_evolution",
    "sales_distribution",
    "stock_distribution",
    "margins",
    "monthly_sales",
    "heatmap",
]


class ExportError(Exception):
    """The report could not be delivered to its destination."""


def save_outputs(
    result: AnalysisResult, base_name: str, output_dir: Optional[Path] = None
) -> list[Path]:
    """Saves every view to its own dated CSV, the heatmap pivot, and optionally the full result as JSON."""
    output_dir = output_dir or settings.OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()
    written = []

    for view in TABULAR_VIEWS:
        rows = getattr(result, view)
        if not rows:
            logger.info(f"INFO: '{view}' is empty, no CSV written.")
            continue
        csv_path = output_dir / f"{base_name}_{view}_{date_suffix}.csv"
        pd.DataFrame([row.model_dump() for row in rows]).to_csv(csv_path, index=False)
        written.append(csv_path)

    summary_path = output_dir / f"{base_name}_summary_{date_suffix}.csv"
    pd.DataFrame([result.summary.model_dump()]).to_csv(summary_path, index=False)
    written.append(summary_path)

    pivot = heatmap_to_frame(result.heatmap)
    if not pivot.empty:
        pivot_path = output_dir / f"{base_name}_heatmap_grid_{date_suffix}.csv"
        pivot.to_csv(pivot_path)
        written.append(pivot_path)

    if settings.SAVE_JSON_OUTPUT:
        json_path = output_dir / f"{base_name}_{date_suffix}.json"
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(
                result.model_dump(mode="json", by_alias=True),
                f,
                indent=2,
                ensure_ascii=False,
            )
        written.append(json_path)
    else:
        logger.info("INFO: Skipping JSON file save as per configuration.")

    logger.info(f"✅ {len(written)} output files saved to: {output_dir}")
    return written


def write_report(document: str, output_dir: Optional[Path] = None, day: Optional[date] = None) -> Path:
    """Writes the rendered report next to the other outputs."""
    output_dir = output_dir or settings.OUTPUT_DIR
    path = output_dir / report_filename(day)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Could not write report to {path}: {e}") from e
    return path


def post_to_webhook(document: str, filename: str, url: Optional[str] = None) -> bool:
    """
    Posts the rendered report to the export webhook. Returns False when no webhook
    is configured; raises ExportError when the post fails.
    """
    url = url or settings.EXPORT_WEBHOOK_URL
    if not url:
        logger.warning("⚠️ EXPORT_WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting report to webhook: {url}")
    payload = {"filename": filename, "contentType": "text/html", "document": document}
    try:
        response = requests.post(url, json=payload, timeout=settings.EXPORT_TIMEOUT)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise ExportError(f"Error posting report to webhook: {e}") from e

    logger.info("✅ Report successfully posted to webhook.")
    return True


class ReportExporter:
    """
    Hands a rendered report to the export sink in the background.

    `export()` returns immediately; the outcome arrives through `on_success(path)` or
    `on_failure(exc)`. Nothing here touches the computed views, so a failed export
    leaves them intact.
    """

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        webhook_url: Optional[str] = None,
        post_webhook: bool = True,
    ):
        self.output_dir = output_dir
        self.webhook_url = webhook_url
        self.post_webhook = post_webhook
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="report-export")

    def _deliver(self, document: str, day: Optional[date]) -> Path:
        path = write_report(document, self.output_dir, day)
        logger.info(f"✅ Report saved to: {path}")
        if self.post_webhook:
            post_to_webhook(document, path.name, self.webhook_url)
        return path

    def export(
        self,
        document: str,
        on_success: Optional[Callable[[Path], None]] = None,
        on_failure: Optional[Callable[[Exception], None]] = None,
        day: Optional[date] = None,
    ) -> Future:
        return self._executor.submit(self._run, document, day, on_success, on_failure)

    def _run(self, document, day, on_success, on_failure) -> Path:
        # Callbacks run on the worker before the future resolves, so waiting
        # on the future also waits for them.
        try:
            path = self._deliver(document, day)
        except Exception as e:
            logger.error(f"❌ Report export failed: {e}")
            if on_failure:
                on_failure(e)
            raise
        if on_success:
            try:
                on_success(path)
            except Exception as e:
                logger.error(f"❌ Report export callback failed: {e}")
                if on_failure:
                    on_failure(e)
                raise
        return path

    def close(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
