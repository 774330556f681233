import argparse
import logging
import sys

from pydantic import ValidationError

from stock_analytics import settings
from stock_analytics.logger import setup_logger
from stock_analytics.pipelines.stock import StockAnalysisPipeline
from stock_analytics.schemas import AnalysisFilters


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute stock and sales analytics from a product catalog and an invoice ledger."
    )
    parser.add_argument(
        "--product",
        default=settings.ALL_PRODUCTS,
        help=f"Product id to focus on, or '{settings.ALL_PRODUCTS}' (default).",
    )
    parser.add_argument("--year", type=int, help="Year for the monthly trend and heatmap (default: current year).")
    parser.add_argument("--period", choices=settings.PERIODS, default="month")
    parser.add_argument("--search", default="", help="Search text (kept for the dashboard, not used in calculations).")
    parser.add_argument("--no-export", action="store_true", help="Do not render and export the report.")
    parser.add_argument("--test-mode", action="store_true", help="Skip the webhook post.")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def run_process(argv=None) -> int:
    """Main orchestration function to run the entire analytics process."""
    args = parse_args(argv)
    logger = setup_logger(log_level=logging.DEBUG if args.verbose else logging.INFO)

    filter_values = {
        "selected_product": args.product,
        "selected_period": args.period,
        "search_term": args.search,
    }
    if args.year is not None:
        filter_values["selected_year"] = args.year
    try:
        filters = AnalysisFilters(**filter_values)
    except ValidationError as e:
        logger.error(f"❌ Invalid filters: {e}")
        return 2

    pipeline = StockAnalysisPipeline(
        filters=filters, export=not args.no_export, test_mode=args.test_mode
    )
    result = pipeline.run()
    if result is None:
        return 1
    if pipeline.export_status == "failure":
        logger.error("❌ Views were saved but the report could not be exported.")
        return 3
    return 0


if __name__ == "__main__":
    sys.exit(run_process())
