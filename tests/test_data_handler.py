from datetime import date

import pytest
import requests

from stock_analytics import data_handler, settings
from stock_analytics.data_handler import ExportError, ReportExporter, post_to_webhook, save_outputs
from stock_analytics.engine import run_analysis
from stock_analytics.schemas import AnalysisFilters


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


def test_save_outputs_writes_views(tmp_path, monkeypatch, products, invoices):
    monkeypatch.setattr(settings, "SAVE_JSON_OUTPUT", True)
    result = run_analysis(products, invoices, AnalysisFilters(selected_year=2024))

    written = save_outputs(result, "stock_report", tmp_path)
    names = [p.name for p in written]

    assert any(n.startswith("stock_report_margins_") for n in names)
    assert any(n.startswith("stock_report_heatmap_grid_") for n in names)
    assert any(n.startswith("stock_report_summary_") for n in names)
    assert any(n.endswith(".json") for n in names)
    # No product selected, so there is no stock evolution to save.
    assert not any("stock_evolution" in n for n in names)
    assert all(p.exists() for p in written)


def test_save_outputs_can_skip_json(tmp_path, monkeypatch, products, invoices):
    monkeypatch.setattr(settings, "SAVE_JSON_OUTPUT", False)
    result = run_analysis(products, invoices, AnalysisFilters(selected_year=2024))
    written = save_outputs(result, "stock_report", tmp_path)
    assert not any(p.suffix == ".json" for p in written)


def test_post_to_webhook_without_url(monkeypatch):
    monkeypatch.setattr(settings, "EXPORT_WEBHOOK_URL", None)
    assert post_to_webhook("<div/>", "report.html") is False


def test_post_to_webhook_sends_document(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json))
        return FakeResponse()

    monkeypatch.setattr(data_handler.requests, "post", fake_post)
    assert post_to_webhook("<div/>", "report.html", url="https://hooks.example.test/x") is True
    assert calls[0][0] == "https://hooks.example.test/x"
    assert calls[0][1]["document"] == "<div/>"
    assert calls[0][1]["filename"] == "report.html"


def test_post_to_webhook_failure_raises_export_error(monkeypatch):
    monkeypatch.setattr(data_handler.requests, "post", lambda *a, **k: FakeResponse(500))
    with pytest.raises(ExportError):
        post_to_webhook("<div/>", "report.html", url="https://hooks.example.test/x")


def test_exporter_reports_success(tmp_path):
    outcomes = []
    with ReportExporter(output_dir=tmp_path, post_webhook=False) as exporter:
        future = exporter.export(
            "<div>ok</div>",
            on_success=lambda path: outcomes.append(("ok", path)),
            on_failure=lambda exc: outcomes.append(("error", exc)),
            day=date(2024, 3, 5),
        )
        path = future.result(timeout=5)

    assert outcomes == [("ok", path)]
    assert path.name == "Rapport_Stock_Avance_05-03-2024.html"
    assert path.read_text(encoding="utf-8") == "<div>ok</div>"


def test_exporter_reports_failure(tmp_path, monkeypatch):
    def broken_post(*args, **kwargs):
        raise requests.exceptions.ConnectionError("unreachable")

    monkeypatch.setattr(data_handler.requests, "post", broken_post)
    outcomes = []
    with ReportExporter(output_dir=tmp_path, webhook_url="https://hooks.example.test/x") as exporter:
        future = exporter.export(
            "<div/>",
            on_success=lambda path: outcomes.append("ok"),
            on_failure=lambda exc: outcomes.append(exc),
        )
        error = future.exception(timeout=5)

    assert isinstance(error, ExportError)
    assert outcomes == [error]


def test_exporter_reports_failing_success_callback(tmp_path):
    failures = []

    def broken_callback(path):
        raise RuntimeError("renderer closed")

    with ReportExporter(output_dir=tmp_path, post_webhook=False) as exporter:
        future = exporter.export(
            "<div/>", on_success=broken_callback, on_failure=failures.append
        )
        error = future.exception(timeout=5)

    assert isinstance(error, RuntimeError)
    assert failures == [error]
