"""Top-countries bar chart: tooltip, hover/pin highlight and animated re-sorting."""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional

import pandas as pd
from bokeh.document import Document
from bokeh.events import MouseLeave, MouseMove, Tap
from bokeh.models import ColumnDataSource, FixedTicker, HoverTool, NumeralTickFormatter, Range1d, Select
from bokeh.plotting import figure

from gtd_charts.config import (
    BAR_COLOR,
    BAR_HEIGHT,
    BAR_HIGHLIGHT_COLOR,
    BAR_LABEL_ANGLE_DEG,
    BAR_PADDING,
    BAR_STATIC_HEIGHT,
    BAR_STATIC_WIDTH,
    BAR_WIDTH,
    SORT_DURATION_MS,
    SORT_ORDERS,
    SORT_STAGGER_MS,
)
from gtd_charts.interaction import HighlightState
from gtd_charts.scales import BandScale, nice_domain
from gtd_charts.transitions import Animator, Tween

logger = logging.getLogger(__name__)

SORT_KEYS: Dict[str, Callable[[dict], object]] = {
    "ascending": lambda row: row["total"],
    "descending": lambda row: -row["total"],
    "alphabetical": lambda row: row["country"],
}
SORT_LABELS = {"descending": "Descending", "ascending": "Ascending", "alphabetical": "Alphabetical"}


def sort_rows(rows: List[dict], order: str) -> List[dict]:
    """Stable sort of bar rows by one of the supported orders."""
    if order not in SORT_KEYS:
        raise ValueError(f"unknown sort order {order!r}; expected one of {', '.join(SORT_ORDERS)}")
    return sorted(rows, key=SORT_KEYS[order])


class BarChart:
    def __init__(self, totals: pd.DataFrame, interactive: bool = True, doc: Optional[Document] = None):
        self.data = totals.reset_index(drop=True)
        self.interactive = interactive
        self.animator = Animator(doc)
        self.rows = self.data[["country", "total"]].to_dict(orient="records")
        self.countries = [row["country"] for row in self.rows]
        self.order = list(self.countries)
        self.scale = BandScale(domain=self.order, range=(0.0, float(max(len(self.order), 1))), padding=BAR_PADDING)
        self.state = HighlightState(self.countries)

        self.source = ColumnDataSource(
            data=dict(
                country=self.countries,
                total=[row["total"] for row in self.rows],
                x=self.scale.centers(),
                color=self._colors(),
            )
        )
        self.sort_select: Optional[Select] = None
        self.figure = self._build_figure()
        if interactive:
            self.sort_select = Select(
                title="Sort order",
                value="descending",
                options=[(order, SORT_LABELS[order]) for order in SORT_ORDERS],
                name="sortOrder",
            )
            self.sort_select.on_change("value", self.on_sort_change)

    def _build_figure(self):
        max_total = max((float(row["total"]) for row in self.rows), default=0.0)
        top = nice_domain(0.0, max_total)[1] if self.interactive else max_total
        fig = figure(
            title="Top 10 Countries by Deaths from Terrorism",
            width=BAR_WIDTH if self.interactive else BAR_STATIC_WIDTH,
            height=BAR_HEIGHT if self.interactive else BAR_STATIC_HEIGHT,
            x_range=Range1d(*self.scale.range),
            y_range=Range1d(0, top or 1),
            x_axis_label="Country",
            y_axis_label="Total Deaths",
            toolbar_location=None,
            tools="",
        )
        renderer = fig.vbar(
            x="x",
            top="total",
            width=self.scale.bandwidth,
            fill_color="color",
            line_color=None,
            source=self.source,
        )
        fig.xaxis.major_label_orientation = math.radians(BAR_LABEL_ANGLE_DEG)
        fig.yaxis.formatter = NumeralTickFormatter(format="0,0")
        fig.xgrid.grid_line_color = None
        fig.title.align = "center"
        self._apply_axis(fig)

        if self.interactive:
            fig.add_tools(
                HoverTool(renderers=[renderer], tooltips=[("Country", "@country"), ("Deaths", "@total{0,0}")])
            )
            fig.on_event(MouseMove, self.on_mouse_move)
            fig.on_event(MouseLeave, self.on_mouse_leave)
            fig.on_event(Tap, self.on_tap)
        return fig

    def _apply_axis(self, fig=None) -> None:
        """Place one tick per band, labelled with its country."""
        fig = fig or self.figure
        self._label_positions(fig, self.scale.centers(), self.order)

    @staticmethod
    def _label_positions(fig, positions: List[float], countries: List[str]) -> None:
        fig.xaxis.ticker = FixedTicker(ticks=list(positions))
        fig.xaxis.major_label_overrides = {x: str(country) for x, country in zip(positions, countries)}

    def _colors(self) -> List[str]:
        return self.state.colors(self.countries, BAR_COLOR, BAR_HIGHLIGHT_COLOR)

    def _refresh_colors(self) -> None:
        self.source.data["color"] = self._colors()

    def bar_at(self, x: Optional[float], y: Optional[float]) -> Optional[str]:
        """Country whose bar covers the data-space point, if any."""
        if x is None or y is None:
            return None
        country = self.scale.locate(x)
        if country is None:
            return None
        total = self.rows[self.countries.index(country)]["total"]
        return country if 0 <= y <= total else None

    def on_mouse_move(self, event: MouseMove) -> None:
        if self.state.hover(self.bar_at(event.x, event.y)):
            self._refresh_colors()

    def on_mouse_leave(self, event: MouseLeave) -> None:
        if self.state.hover(None):
            self._refresh_colors()

    def on_tap(self, event: Tap) -> None:
        country = self.bar_at(event.x, event.y)
        if country is not None:
            self.toggle_pin(country)

    def toggle_pin(self, country: str) -> bool:
        pinned = self.state.toggle_pin(country)
        logger.debug("%s %s", "Pinned" if pinned else "Unpinned", country)
        self._refresh_colors()
        return pinned

    def on_sort_change(self, attr, old, new) -> None:
        self.sort(new)

    def sort(self, order: str) -> List[str]:
        """Re-order the bars and slide each one, with its axis label, to its new band.

        Bars start from where they are drawn now, so a sort that interrupts a
        running one carries on from the mid-animation positions.
        """
        by_country = {row["country"]: row for row in self.rows}
        new_order = [row["country"] for row in sort_rows([by_country[c] for c in self.order], order)]
        current_x = dict(zip(self.countries, self.source.data["x"]))

        self.order = new_order
        self.scale = self.scale.with_domain(new_order)
        logger.info("Sorted bars %s", order)

        tweens = [
            Tween(
                start=current_x[country],
                end=self.scale.center(country),
                duration=SORT_DURATION_MS,
                delay=i * SORT_STAGGER_MS,
            )
            for i, country in enumerate(self.countries)
        ]
        duration = max((tween.finish for tween in tweens), default=0.0)

        def frame(elapsed: float) -> None:
            positions = [tween.value_at(elapsed) for tween in tweens]
            self.source.data["x"] = positions
            if elapsed >= duration:
                self._apply_axis()
            else:
                self._label_positions(self.figure, positions, self.countries)

        self.animator.run(frame, duration)
        return new_order
