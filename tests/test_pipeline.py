from datetime import date

import pytest

from stock_analytics import settings
from stock_analytics.engine import run_analysis
from stock_analytics.pipelines.stock import StockAnalysisPipeline
from stock_analytics.schemas import AnalysisFilters

from main import parse_args

PRODUCTS_CSV = """id,name,category,stock,purchasePrice,unit
p1,Widget,Outils,100,10,pièce
p2,Gadget,Outils,5,4,
"""

INVOICES_CSV = """invoice_id,date,description,quantity,total
F1,2024-03-05,Widget,20,400
F1,2024-03-05,Gadget,3,30
F2,2024-03-20,Gadget,5,50
"""


@pytest.fixture
def input_dir(tmp_path):
    folder = tmp_path / "input"
    folder.mkdir()
    (folder / settings.PRODUCTS_FILENAME).write_text(PRODUCTS_CSV, encoding="utf-8")
    (folder / settings.INVOICES_FILENAME).write_text(INVOICES_CSV, encoding="utf-8")
    return folder


def test_run_analysis_bundles_every_view(products, invoices):
    filters = AnalysisFilters(selected_product="p1", selected_year=2024, selected_period="quarter")
    result = run_analysis(products, invoices, filters, today=date(2024, 3, 31))

    assert len(result.stock_evolution) == settings.STOCK_EVOLUTION_MONTHS
    assert len(result.monthly_sales) == 12
    assert len(result.heatmap) == 36
    assert result.summary.total_stock_initial == 100
    assert result.stock_distribution_total == 700
    assert result.available_years == [2024, 2023]
    # p1 alone: 640 sold against 1000 of stock bought.
    assert result.summary.gross_margin == -360
    assert result.performance == "deficit"


def test_period_and_search_do_not_change_results(products, invoices):
    base = run_analysis(products, invoices, AnalysisFilters(selected_year=2024), today=date(2024, 3, 1))
    other = run_analysis(
        products,
        invoices,
        AnalysisFilters(selected_year=2024, selected_period="year", search_term="Wid"),
        today=date(2024, 3, 1),
    )
    assert base.model_dump(exclude={"filters"}) == other.model_dump(exclude={"filters"})


def test_filters_accept_camel_case_and_reject_unknown_period():
    filters = AnalysisFilters.model_validate({"selectedProduct": "p1", "selectedYear": 2023})
    assert filters.selected_product == "p1"
    assert filters.selected_period == "month"
    with pytest.raises(ValueError):
        AnalysisFilters(selected_period="week")


def test_pipeline_end_to_end(input_dir, tmp_path):
    output_dir = tmp_path / "output"
    pipeline = StockAnalysisPipeline(
        filters=AnalysisFilters(selected_product="p1", selected_year=2024),
        input_dir=input_dir,
        output_dir=output_dir,
        test_mode=True,
        today=date(2024, 3, 31),
    )

    result = pipeline.run()

    assert result is not None
    assert result.summary.total_sales_value == 400
    assert result.summary.total_remaining_stock == 80
    assert result.stock_evolution[-1].sold == 20
    assert pipeline.export_status == "success"
    assert pipeline.report_path.name == "Rapport_Stock_Avance_31-03-2024.html"
    assert "Marge Brute Totale" in pipeline.report_path.read_text(encoding="utf-8")
    assert any(p.name.startswith("stock_report_summary_") for p in output_dir.iterdir())


def test_pipeline_without_export(input_dir, tmp_path):
    pipeline = StockAnalysisPipeline(
        input_dir=input_dir, output_dir=tmp_path / "out", export=False, test_mode=True
    )
    assert pipeline.run() is not None
    assert pipeline.export_status is None


def test_pipeline_stops_on_missing_source(tmp_path):
    pipeline = StockAnalysisPipeline(input_dir=tmp_path, output_dir=tmp_path / "out", test_mode=True)
    assert pipeline.run() is None


def test_pipeline_stops_on_invalid_rows(input_dir, tmp_path):
    (input_dir / settings.PRODUCTS_FILENAME).write_text(
        "id,name,category,stock,purchasePrice\np1,Widget,Outils,beaucoup,10\n", encoding="utf-8"
    )
    pipeline = StockAnalysisPipeline(input_dir=input_dir, output_dir=tmp_path / "out", test_mode=True)
    assert pipeline.run() is None
    assert not (tmp_path / "out").exists()


def test_cli_defaults():
    args = parse_args([])
    assert args.product == settings.ALL_PRODUCTS
    assert args.period == "month"
    assert args.year is None
    assert parse_args(["--product", "p1", "--year", "2023", "--no-export"]).no_export
