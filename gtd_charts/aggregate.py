"""Derived datasets behind the three charts.

Fields are parsed explicitly with ``pd.to_numeric(errors="coerce")`` so an
invalid number becomes NaN (absent) and is filtered out instead of leaking
into a group of its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

import networkx as nx
import numpy as np
import pandas as pd

from gtd_charts.config import (
    ATTACK_COLUMN,
    COUNTRY_COLUMN,
    FATALITY_COLUMN,
    TARGET_COLUMN,
    TOP_N_COUNTRIES,
    YEAR_COLUMN,
)
from gtd_charts.loader import Records, to_frame

logger = logging.getLogger(__name__)


@dataclass
class CoOccurrence:
    """Square attack/target count matrix over one shared label index."""

    labels: List[str]
    matrix: np.ndarray

    @property
    def index(self) -> Dict[str, int]:
        return {label: i for i, label in enumerate(self.labels)}

    def count(self, attack: str, target: str) -> int:
        index = self.index
        return int(self.matrix[index[attack], index[target]])

    @property
    def total(self) -> int:
        return int(self.matrix.sum())


@dataclass
class ChartData:
    yearly: pd.DataFrame
    top_countries: pd.DataFrame
    co_occurrence: CoOccurrence


def _present(values: pd.Series) -> pd.Series:
    return values.notna() & values.astype(str).ne("")


def group_count_by_year(records: Records) -> pd.DataFrame:
    """Count incidents per year, ascending by year."""
    frame = to_frame(records)
    years = pd.to_numeric(frame[YEAR_COLUMN], errors="coerce").astype(float)
    valid = years[years.notna() & np.isfinite(years) & (years % 1 == 0)]
    dropped = len(years) - len(valid)
    if dropped:
        logger.warning("Ignored %d records without a valid year", dropped)

    counts = valid.astype("int64").value_counts().sort_index()
    return pd.DataFrame({"year": counts.index.to_numpy(dtype="int64"), "count": counts.to_numpy(dtype="int64")})


def top_countries_by_deaths(records: Records, n: int = TOP_N_COUNTRIES) -> pd.DataFrame:
    """Sum fatalities per country and keep the ``n`` largest totals."""
    if n < 0:
        raise ValueError(f"n must not be negative, got {n}")
    frame = to_frame(records)
    work = pd.DataFrame(
        {
            "country": frame[COUNTRY_COLUMN],
            "deaths": pd.to_numeric(frame[FATALITY_COLUMN], errors="coerce").astype(float),
        }
    )
    work = work[_present(work["country"])]

    totals = work.groupby("country", sort=False)["deaths"].sum().rename("total").reset_index()
    totals = totals[totals["total"].notna()]
    return (
        totals.sort_values("total", ascending=False, kind="stable")
        .head(n)
        .reset_index(drop=True)
    )


def build_co_occurrence_matrix(records: Records) -> CoOccurrence:
    """Count attack-type/target-type pairs.

    Labels are the attack types in encounter order followed by any target
    types not already seen; records missing either label are ignored.
    """
    frame = to_frame(records)
    mask = _present(frame[ATTACK_COLUMN]) & _present(frame[TARGET_COLUMN])
    pairs = frame.loc[mask, [ATTACK_COLUMN, TARGET_COLUMN]]
    if mask.sum() < len(frame):
        logger.debug("Skipped %d records missing an attack or target type", len(frame) - int(mask.sum()))

    attack_labels = list(dict.fromkeys(pairs[ATTACK_COLUMN]))
    target_labels = list(dict.fromkeys(pairs[TARGET_COLUMN]))
    labels = list(dict.fromkeys(attack_labels + target_labels))
    if not labels:
        return CoOccurrence(labels=[], matrix=np.zeros((0, 0), dtype=int))

    graph = nx.DiGraph()
    graph.add_nodes_from(labels)
    for (attack, target), incidents in pairs.groupby([ATTACK_COLUMN, TARGET_COLUMN], sort=False).size().items():
        graph.add_edge(attack, target, weight=int(incidents))

    matrix = nx.to_numpy_array(graph, nodelist=labels, weight="weight").astype(int)
    return CoOccurrence(labels=labels, matrix=matrix)


def aggregate(records: Records, top_n: int = TOP_N_COUNTRIES) -> ChartData:
    frame = to_frame(records)
    return ChartData(
        yearly=group_count_by_year(frame),
        top_countries=top_countries_by_deaths(frame, top_n),
        co_occurrence=build_co_occurrence_matrix(frame),
    )
