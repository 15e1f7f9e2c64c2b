"""Terrorism incident charts rendered with Bokeh."""

from gtd_charts.aggregate import (  # noqa: F401
    ChartData,
    CoOccurrence,
    aggregate,
    build_co_occurrence_matrix,
    group_count_by_year,
    top_countries_by_deaths,
)
from gtd_charts.errors import ConfigError, DataLoadError, GtdChartsError  # noqa: F401

__version__ = "0.1.0"
