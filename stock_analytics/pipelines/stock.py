import logging
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .. import data_handler, parsers, settings
from ..engine import run_analysis
from ..pipeline import DataPipeline
from ..report import format_amount, format_number, render_report
from ..schemas import AnalysisFilters, AnalysisResult, Invoice, Product

logger = logging.getLogger(__name__)


class StockAnalysisPipeline(DataPipeline):
    def __init__(
        self,
        filters: Optional[AnalysisFilters] = None,
        input_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        export: bool = True,
        test_mode: bool = False,
        today: Optional[date] = None,
    ):
        super().__init__("stock", test_mode=test_mode)
        self.filters = filters or AnalysisFilters()
        self.input_dir = input_dir or settings.INPUT_DIR
        self.output_dir = output_dir or settings.OUTPUT_DIR
        self.export = export
        self.today = today
        # Filled by the exporter callbacks: None until an export has finished.
        self.export_status: Optional[str] = None
        self.report_path: Optional[Path] = None

        self.SOURCES = {
            "products": (settings.PRODUCTS_FILENAME, parsers.parse_products_report),
            "invoices": (settings.INVOICES_FILENAME, parsers.parse_invoices_report),
        }

    def extract(self) -> Optional[dict[str, list[dict]]]:
        logger.info("--- Loading Catalog and Ledger ---")
        raw = {}
        for source, (filename, parser_func) in self.SOURCES.items():
            path = self.input_dir / filename
            logger.info(f"\n-- Processing Source: {source} ({path.name}) --")
            records = parser_func(path)
            if records is None:
                logger.error(f"  > ERROR: Required '{source}' could not be loaded.")
                return None
            raw[source] = records
        return raw

    def transform(self, raw_data: dict[str, list[dict]]) -> Optional[AnalysisResult]:
        try:
            logger.info("Validating data against schema...")
            products = [Product.model_validate(row) for row in raw_data["products"]]
            invoices = [Invoice.model_validate(row) for row in raw_data["invoices"]]
            logger.info(
                f"✅ Data validation successful ({len(products)} products, {len(invoices)} invoices)."
            )
        except ValidationError as e:
            logger.error("❌ Data validation failed!")
            logger.error(e)
            return None

        if not products or not invoices:
            logger.warning("⚠️ Empty catalog or ledger: every view will be empty or zero.")

        logger.info("\n--- Computing Views ---")
        result = run_analysis(products, invoices, self.filters, today=self.today)

        stats = result.summary
        logger.info(f"Gross margin:        {format_amount(stats.gross_margin)}")
        logger.info(f"Remaining stock:     {format_number(stats.total_remaining_stock)}")
        logger.info(f"Units sold:          {format_number(stats.total_quantity_sold)}")
        logger.info(f"Dormant products:    {stats.dormant_products}")
        if not result.stock_evolution:
            logger.info("Stock evolution: select a product to see its evolution.")
        return result

    def load(self, result: AnalysisResult):
        data_handler.save_outputs(result, f"{self.report_type}_report", self.output_dir)

        if not self.export:
            logger.info("INFO: Report export disabled.")
            return

        document = render_report(result.summary, generated_on=self.today)
        if self.test_mode:
            logger.info("🧪 Test Mode: Skipping webhook post.")

        with data_handler.ReportExporter(
            output_dir=self.output_dir, post_webhook=not self.test_mode
        ) as exporter:
            exporter.export(
                document,
                on_success=self._on_export_success,
                on_failure=self._on_export_failure,
                day=self.today,
            )

    def _on_export_success(self, path: Path):
        self.export_status = "success"
        self.report_path = path

    def _on_export_failure(self, error: Exception):
        # The views are already saved; only the report is missing.
        self.export_status = "failure"
