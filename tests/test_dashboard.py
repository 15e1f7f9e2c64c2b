"""Tests for gtd_charts.dashboard — the load → aggregate → render pipeline."""

from bokeh.document import Document
from bokeh.models import Div, Select

from gtd_charts.config import Settings
from gtd_charts.dashboard import build_charts, build_document, build_static_page, load_chart_data


def _models(layout):
    return list(layout.select({"type": Select}))


class TestBuildCharts:
    def test_interactive_layout_has_controls(self, chart_data):
        dashboard = build_charts(chart_data)
        assert len(_models(dashboard.layout)) == 1
        assert dashboard.line.status in dashboard.layout.select({"type": Div})

    def test_static_layout_has_no_controls(self, chart_data):
        dashboard = build_charts(chart_data, interactive=False)
        assert _models(dashboard.layout) == []

    def test_views_are_named(self, chart_data):
        layout = build_charts(chart_data).layout
        for name in ("view1", "view2", "view3"):
            assert layout.select_one({"name": name}) is not None


class TestPipeline:
    def test_load_chart_data(self, csv_path):
        data = load_chart_data(Settings(data_path=csv_path))
        assert data.yearly["count"].tolist() == [2, 1, 1]
        assert data.top_countries["country"].tolist() == ["A", "B"]
        assert data.co_occurrence.total == 3

    def test_build_document(self, csv_path):
        doc = Document()
        dashboard = build_document(doc, Settings(data_path=csv_path))
        assert dashboard is not None
        assert len(doc.roots) == 1
        assert doc.title == "Global Terrorism Charts"

    def test_build_document_with_missing_data(self, tmp_path):
        doc = Document()
        assert build_document(doc, Settings(data_path=tmp_path / "missing.csv")) is None
        assert len(doc.roots) == 1
        assert isinstance(doc.roots[0], Div)
        assert "Could not load data" in doc.roots[0].text

    def test_static_page(self, csv_path, tmp_path):
        path = build_static_page(tmp_path / "charts.html", Settings(data_path=csv_path))
        html = path.read_text(encoding="utf-8")
        assert "Global Terrorism Charts" in html
        assert "Top 10 Countries by Deaths from Terrorism" in html
