import logging
from datetime import date
from typing import Optional, Sequence

from .aggregator import available_years
from .schemas import AnalysisFilters, AnalysisResult, Invoice, Product
from .views.distribution import build_distribution, distribution_total
from .views.heatmap import build_heatmap
from .views.margins import build_margins
from .views.monthly_trend import build_monthly_trend
from .views.stock_evolution import build_stock_evolution
from .views.summary import build_summary, performance_status

logger = logging.getLogger(__name__)


def run_analysis(
    products: Sequence[Product],
    invoices: Sequence[Invoice],
    filters: Optional[AnalysisFilters] = None,
    today: Optional[date] = None,
) -> AnalysisResult:
    """
    Computes every view for one filter state. Each builder rescans the raw inputs on
    its own; nothing is cached between builders or between calls.
    """
    filters = filters or AnalysisFilters()
    logger.debug(
        f"Analysis for product={filters.selected_product} year={filters.selected_year} "
        f"({len(products)} products, {len(invoices)} invoices)"
    )

    summary = build_summary(products, invoices, filters.selected_product)
    stock_distribution = build_distribution(products, invoices, "stock")

    return AnalysisResult(
        filters=filters,
        summary=summary,
        stock_evolution=build_stock_evolution(
            products, invoices, filters.selected_product, today=today
        ),
        sales_distribution=build_distribution(products, invoices, "sales"),
        stock_distribution=stock_distribution,
        stock_distribution_total=distribution_total(stock_distribution),
        margins=build_margins(products, invoices),
        monthly_sales=build_monthly_trend(
            products, invoices, filters.selected_year, filters.selected_product
        ),
        heatmap=build_heatmap(products, invoices, filters.selected_year),
        available_years=available_years(invoices),
        performance=performance_status(summary),
    )
