"""Load → aggregate → render pipeline and the page that holds the three views."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from bokeh.document import Document
from bokeh.io import save
from bokeh.layouts import column, row
from bokeh.models import Div, LayoutDOM
from bokeh.resources import CDN

from gtd_charts.aggregate import ChartData, aggregate
from gtd_charts.bar_chart import BarChart
from gtd_charts.chord_chart import ChordChart
from gtd_charts.config import CARD_STYLE, Settings, load_settings
from gtd_charts.errors import DataLoadError
from gtd_charts.line_chart import LineChart
from gtd_charts.loader import load_records

logger = logging.getLogger(__name__)

PAGE_TITLE = "Global Terrorism Charts"


@dataclass
class Dashboard:
    data: ChartData
    line: LineChart
    bar: BarChart
    chord: ChordChart
    layout: LayoutDOM


def page_layout(line: LineChart, bar: BarChart, chord: ChordChart, interactive: bool) -> LayoutDOM:
    view1 = [line.figure]
    view2 = [bar.figure]
    if interactive:
        view1.append(line.status)
        view2.insert(0, bar.sort_select)
    return column(
        Div(text=f"<h2 style='margin:0;'>{PAGE_TITLE}</h2>"),
        row(
            column(*view1, name="view1", styles={**CARD_STYLE, "gap": "10px"}),
            column(*view2, name="view2", styles={**CARD_STYLE, "gap": "10px"}),
            styles={"gap": "16px"},
        ),
        column(chord.figure, name="view3", styles={**CARD_STYLE, "gap": "10px"}),
        styles={"gap": "12px", "padding": "16px"},
    )


def build_charts(data: ChartData, interactive: bool = True, doc: Optional[Document] = None) -> Dashboard:
    """Draw line, bar and chord charts in that order; they share no state."""
    line = LineChart(data.yearly, interactive=interactive, doc=doc)
    bar = BarChart(data.top_countries, interactive=interactive, doc=doc)
    chord = ChordChart(data.co_occurrence, interactive=interactive)
    return Dashboard(data=data, line=line, bar=bar, chord=chord, layout=page_layout(line, bar, chord, interactive))


def load_chart_data(settings: Settings) -> ChartData:
    records = load_records(settings.data_path)
    return aggregate(records, top_n=settings.top_n)


def build_document(doc: Document, settings: Optional[Settings] = None) -> Optional[Dashboard]:
    """Populate a server document with the interactive variant.

    A dataset that cannot be loaded leaves the charts out and shows the error.
    """
    settings = settings or load_settings()
    doc.title = PAGE_TITLE
    try:
        data = load_chart_data(settings)
    except DataLoadError as exc:
        logger.error("Charts not rendered: %s", exc)
        doc.add_root(Div(text=f"<b>Could not load data:</b> {exc}", styles=CARD_STYLE))
        return None

    dashboard = build_charts(data, interactive=True, doc=doc)
    doc.add_root(dashboard.layout)
    return dashboard


def build_static_page(path: Union[str, Path], settings: Optional[Settings] = None) -> Path:
    """Write the non-interactive variant to a standalone HTML file."""
    settings = settings or load_settings()
    dashboard = build_charts(load_chart_data(settings), interactive=False)
    path = Path(path)
    save(dashboard.layout, filename=path, resources=CDN, title=PAGE_TITLE)
    logger.info("Wrote static charts to %s", path)
    return path
