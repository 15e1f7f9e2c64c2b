#!/usr/bin/env python3
"""
Global terrorism charts (attacks per year, deadliest countries, attack/target chord).

Run with:
    bokeh serve --show terrorism_dashboard.py

Set GTD_DATA_PATH to read a CSV other than data/global_terrorism_small.csv.
"""

from __future__ import annotations

from bokeh.io import curdoc

from gtd_charts.config import configure_logging, load_settings
from gtd_charts.dashboard import build_document

settings = load_settings()
configure_logging(settings.log_level)

build_document(curdoc(), settings)
curdoc().theme = "light_minimal"
