"""Attacks-per-year line chart with optional year brushing."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import pandas as pd
from bokeh.document import Document
from bokeh.events import SelectionGeometry
from bokeh.models import BasicTicker, BoxSelectTool, ColumnDataSource, Div, HoverTool, NumeralTickFormatter, Range1d
from bokeh.plotting import figure

from gtd_charts.config import (
    HIGHLIGHT_GROW_MS,
    HIGHLIGHT_MARKER_COLOR,
    HIGHLIGHT_MARKER_RADIUS,
    LINE_COLOR,
    LINE_HEIGHT,
    LINE_WIDTH,
    MARKER_COLOR,
    MARKER_RADIUS,
)
from gtd_charts.scales import round_half_up
from gtd_charts.transitions import Animator, Tween

logger = logging.getLogger(__name__)


class LineChart:
    def __init__(self, yearly: pd.DataFrame, interactive: bool = True, doc: Optional[Document] = None):
        self.data = yearly.sort_values("year").reset_index(drop=True)
        self.interactive = interactive
        self.animator = Animator(doc)
        self.selected_range: Optional[Tuple[int, int]] = None

        self.source = ColumnDataSource(
            data=dict(year=self.data["year"].tolist(), count=self.data["count"].tolist())
        )
        self.highlight_source = ColumnDataSource(data=dict(year=[], count=[], size=[]))
        self.status = Div(text="", name="selected-range", styles={"font-size": "13px"})
        self._grow = Tween(start=0.0, end=2.0 * HIGHLIGHT_MARKER_RADIUS, duration=HIGHLIGHT_GROW_MS)
        self.figure = self._build_figure()

    def _build_figure(self):
        if self.data.empty:
            x_range, y_range = Range1d(0, 1), Range1d(0, 1)
        else:
            x_range = Range1d(int(self.data["year"].min()), int(self.data["year"].max()))
            y_range = Range1d(0, max(int(self.data["count"].max()), 1))

        fig = figure(
            title="Global Terrorist Attacks per Year",
            width=LINE_WIDTH,
            height=LINE_HEIGHT,
            x_range=x_range,
            y_range=y_range,
            x_axis_label="Year",
            y_axis_label="Number of Attacks",
            tools="save" if self.interactive else "",
            toolbar_location="right" if self.interactive else None,
        )
        fig.line(x="year", y="count", source=self.source, line_width=2, color=LINE_COLOR)
        fig.xaxis.ticker = BasicTicker(min_interval=1)
        fig.xaxis.formatter = NumeralTickFormatter(format="0")
        fig.title.align = "center"
        fig.min_border_left = 70

        if self.interactive:
            markers = fig.scatter(
                x="year",
                y="count",
                size=2 * MARKER_RADIUS,
                color=MARKER_COLOR,
                alpha=0.5,
                source=self.source,
            )
            markers.selection_glyph = None
            markers.nonselection_glyph = None
            fig.scatter(
                x="year",
                y="count",
                size="size",
                color=HIGHLIGHT_MARKER_COLOR,
                source=self.highlight_source,
            )
            fig.add_tools(
                HoverTool(renderers=[markers], tooltips=[("Year", "@year"), ("Attacks", "@count{0,0}")])
            )
            brush = BoxSelectTool(dimensions="width", renderers=[markers])
            fig.add_tools(brush)
            fig.toolbar.active_drag = brush
            fig.on_event(SelectionGeometry, self.on_selection)
        return fig

    def on_selection(self, event: SelectionGeometry) -> None:
        if not event.final:
            return
        geometry = event.geometry or {}
        if geometry.get("type") != "rect":
            return
        self.select(geometry.get("x0"), geometry.get("x1"))

    def select(self, x0: Optional[float], x1: Optional[float]) -> Optional[pd.DataFrame]:
        """Highlight the years between two data-space x positions.

        Both ends are rounded to the nearest year and included. A missing end
        leaves the previous highlight untouched.
        """
        if x0 is None or x1 is None:
            return None
        low, high = sorted((x0, x1))
        year0, year1 = round_half_up(low), round_half_up(high)
        picked = self.data[(self.data["year"] >= year0) & (self.data["year"] <= year1)]

        self.selected_range = (year0, year1)
        self.status.text = f"Selected years: {year0}–{year1}"
        self.highlight_source.data = dict(
            year=picked["year"].tolist(),
            count=picked["count"].tolist(),
            size=[self._grow.start] * len(picked),
        )
        logger.info("Brushed years %d-%d (%d points)", year0, year1, len(picked))
        self.animator.run(self._grow_frame, self._grow.finish)
        return picked

    def _grow_frame(self, elapsed: float) -> None:
        size = self._grow.value_at(elapsed)
        self.highlight_source.data["size"] = [size] * len(self.highlight_source.data["year"])
