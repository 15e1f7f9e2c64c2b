"""Read the incident CSV into a DataFrame of raw string columns."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Union

import pandas as pd

from gtd_charts.config import DATA_PATH, REQUIRED_COLUMNS
from gtd_charts.errors import DataLoadError

logger = logging.getLogger(__name__)

Records = Union[pd.DataFrame, Iterable[Mapping[str, object]]]


def load_records(path: Union[str, Path] = DATA_PATH) -> pd.DataFrame:
    """Load the required columns of the dataset.

    Every value is kept as a string (missing cells stay NaN); parsing into
    numbers happens at the aggregation boundary.
    """
    path = Path(path)
    try:
        header = pd.read_csv(path, encoding="latin1", nrows=0)
    except FileNotFoundError as exc:
        raise DataLoadError(f"dataset not found: {path}") from exc
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataLoadError(f"could not read dataset {path}: {exc}") from exc

    missing = [col for col in REQUIRED_COLUMNS if col not in header.columns]
    if missing:
        raise DataLoadError(f"dataset {path} is missing columns: {', '.join(missing)}")

    df = pd.read_csv(path, encoding="latin1", low_memory=False, usecols=REQUIRED_COLUMNS, dtype=str)
    logger.info("Loaded %d incident records from %s", len(df), path)
    return df


def to_frame(records: Records) -> pd.DataFrame:
    """Accept a DataFrame or an iterable of row mappings."""
    if isinstance(records, pd.DataFrame):
        frame = records
    else:
        frame = pd.DataFrame(list(records))
    for col in REQUIRED_COLUMNS:
        if col not in frame.columns:
            frame = frame.assign(**{col: pd.Series([None] * len(frame), index=frame.index, dtype=object)})
    return frame
