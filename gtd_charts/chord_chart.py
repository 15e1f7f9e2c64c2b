"""Attack-type vs target-type chord diagram."""

from __future__ import annotations

import math
from typing import Dict, List, Mapping, Optional

from bokeh.models import ColumnDataSource, HoverTool, Label, Range1d
from bokeh.palettes import Category10
from bokeh.plotting import figure

from gtd_charts.aggregate import CoOccurrence
from gtd_charts.chord import ChordGroup, ChordLayout, arc_polygon, darker, polar_point, ribbon_polygon
from gtd_charts.config import (
    CHORD_HEIGHT,
    CHORD_INNER_RADIUS,
    CHORD_LABEL_OFFSET,
    CHORD_LABEL_OVERRIDES,
    CHORD_OUTER_RADIUS,
    CHORD_PAD_ANGLE,
    CHORD_TITLE,
    CHORD_WIDTH,
    LabelOverride,
)

PALETTE = Category10[10]


def color_for(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


def label_placement(
    group: ChordGroup,
    label: str,
    radius: float,
    overrides: Mapping[str, LabelOverride] = CHORD_LABEL_OVERRIDES,
) -> Dict[str, object]:
    """Position, angle and anchor of a group label just outside its arc.

    Labels read outward along the radius; past the bottom of the circle they
    are turned 180 degrees and right-anchored so the text stays upright.
    """
    override = overrides.get(label, LabelOverride(text=label))
    mid = group.mid_angle
    flip = mid > math.pi
    rotation_deg = math.degrees(mid) - 90 + (180 if flip else 0) + override.extra_rotation_deg
    x, y = polar_point(radius, mid)
    return dict(
        x=x,
        y=y,
        angle=-math.radians(rotation_deg),
        text=override.text,
        align="right" if flip else "left",
    )


class ChordChart:
    def __init__(
        self,
        co_occurrence: CoOccurrence,
        layout: Optional[ChordLayout] = None,
        overrides: Mapping[str, LabelOverride] = CHORD_LABEL_OVERRIDES,
        interactive: bool = True,
    ):
        self.co_occurrence = co_occurrence
        self.interactive = interactive
        self.layout = layout or ChordLayout(pad_angle=CHORD_PAD_ANGLE, sort_subgroups="descending")
        self.overrides = overrides
        self.result = self.layout(co_occurrence.matrix)

        self.arc_source = ColumnDataSource(data=self._arc_data())
        self.ribbon_source = ColumnDataSource(data=self._ribbon_data())
        labels = self._label_data()
        self.label_sources = {}
        for align in ("left", "right"):
            rows = [row for row in labels if row["align"] == align]
            self.label_sources[align] = ColumnDataSource(
                data={key: [row[key] for row in rows] for key in ("x", "y", "angle", "text")}
            )
        self.figure = self._build_figure()

    def _arc_data(self) -> Dict[str, List]:
        labels = self.co_occurrence.labels
        xs, ys, fills, lines, names, totals = [], [], [], [], [], []
        for group in self.result.groups:
            x, y = arc_polygon(group, CHORD_INNER_RADIUS, CHORD_OUTER_RADIUS)
            xs.append(x)
            ys.append(y)
            fills.append(color_for(group.index))
            lines.append(darker(color_for(group.index)))
            names.append(labels[group.index])
            totals.append(group.value)
        return dict(xs=xs, ys=ys, fill=fills, line=lines, label=names, total=totals)

    def _ribbon_data(self) -> Dict[str, List]:
        labels = self.co_occurrence.labels
        xs, ys, fills, lines, flows, counts = [], [], [], [], [], []
        for chord in self.result.chords:
            x, y = ribbon_polygon(chord, CHORD_INNER_RADIUS)
            xs.append(x)
            ys.append(y)
            fills.append(color_for(chord.target.index))
            lines.append(darker(color_for(chord.target.index)))
            flows.append(f"{labels[chord.source.index]} → {labels[chord.target.index]}")
            counts.append(chord.source.value)
        return dict(xs=xs, ys=ys, fill=fills, line=lines, flow=flows, incidents=counts)

    def _label_data(self) -> List[Dict[str, object]]:
        labels = self.co_occurrence.labels
        radius = CHORD_OUTER_RADIUS + CHORD_LABEL_OFFSET
        return [label_placement(group, labels[group.index], radius, self.overrides) for group in self.result.groups]

    def _build_figure(self):
        half = CHORD_HEIGHT / 2
        fig = figure(
            width=CHORD_WIDTH,
            height=CHORD_HEIGHT,
            x_range=Range1d(-half, CHORD_WIDTH - half),
            y_range=Range1d(-(half + 20), half - 20),
            toolbar_location=None,
            tools="",
        )
        arcs = fig.patches(
            xs="xs",
            ys="ys",
            fill_color="fill",
            line_color="line",
            source=self.arc_source,
        )
        ribbons = fig.patches(
            xs="xs",
            ys="ys",
            fill_color="fill",
            line_color="line",
            fill_alpha=0.8,
            source=self.ribbon_source,
        )
        for align, source in self.label_sources.items():
            fig.text(
                x="x",
                y="y",
                text="text",
                angle="angle",
                source=source,
                text_align=align,
                text_baseline="middle",
                text_font_size="10px",
            )
        fig.add_layout(
            Label(
                x=CHORD_OUTER_RADIUS + 120,
                y=0,
                text=CHORD_TITLE,
                text_align="center",
                text_font_size="16px",
            )
        )
        if self.interactive:
            fig.add_tools(
                HoverTool(renderers=[arcs], tooltips=[("Type", "@label"), ("Incidents", "@total{0,0}")]),
                HoverTool(renderers=[ribbons], tooltips=[("Flow", "@flow"), ("Incidents", "@incidents{0,0}")]),
            )
        fig.axis.visible = False
        fig.grid.grid_line_color = None
        fig.outline_line_color = None
        return fig
