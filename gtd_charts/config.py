"""Paths, column names, chart constants and runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, NamedTuple, Optional

from gtd_charts.errors import ConfigError

BASE_PATH = Path(__file__).resolve().parent.parent
DATA_PATH = BASE_PATH / "data" / "global_terrorism_small.csv"

YEAR_COLUMN = "iyear"
COUNTRY_COLUMN = "country_txt"
FATALITY_COLUMN = "nkill"
ATTACK_COLUMN = "attacktype1_txt"
TARGET_COLUMN = "targtype1_txt"
REQUIRED_COLUMNS = [YEAR_COLUMN, COUNTRY_COLUMN, FATALITY_COLUMN, ATTACK_COLUMN, TARGET_COLUMN]

TOP_N_COUNTRIES = 10

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# Line chart
LINE_WIDTH = 700
LINE_HEIGHT = 550
LINE_COLOR = "steelblue"
MARKER_COLOR = "gray"
MARKER_RADIUS = 2
HIGHLIGHT_MARKER_COLOR = "orange"
HIGHLIGHT_MARKER_RADIUS = 4
HIGHLIGHT_GROW_MS = 400

# Bar chart
BAR_WIDTH = 640
BAR_HEIGHT = 400
BAR_STATIC_WIDTH = 600
BAR_STATIC_HEIGHT = 350
BAR_PADDING = 0.1
BAR_COLOR = "crimson"
BAR_HIGHLIGHT_COLOR = "orange"
BAR_LABEL_ANGLE_DEG = 40
SORT_DURATION_MS = 750
SORT_STAGGER_MS = 50
SORT_ORDERS = ["descending", "ascending", "alphabetical"]

# Chord diagram
CHORD_WIDTH = 750
CHORD_HEIGHT = 450
CHORD_INNER_RADIUS = 120
CHORD_OUTER_RADIUS = CHORD_INNER_RADIUS + 10
CHORD_LABEL_OFFSET = 10
CHORD_PAD_ANGLE = 0.05
CHORD_TITLE = "Attack Types vs. Target Types"

ANIMATION_FRAME_MS = 30

CARD_STYLE = {
    "background-color": "#ffffff",
    "padding": "12px 14px",
    "border": "1px solid #e0e7f1",
    "border-radius": "10px",
    "box-shadow": "0 2px 6px rgba(15, 23, 42, 0.08)",
}


class LabelOverride(NamedTuple):
    text: str
    extra_rotation_deg: float = 0.0


# Chord labels that collide with their neighbours at the default placement.
CHORD_LABEL_OVERRIDES: Dict[str, LabelOverride] = {
    "Facility/Infrastructure Attack": LabelOverride(text="Infrastructure", extra_rotation_deg=50),
}


@dataclass
class Settings:
    data_path: Path = DATA_PATH
    log_level: str = LOG_LEVEL
    top_n: int = TOP_N_COUNTRIES


def _parse_top_n(value: str) -> int:
    try:
        top_n = int(value)
    except ValueError:
        raise ConfigError(f"GTD_TOP_N must be a whole number, got {value!r}") from None
    if top_n < 0:
        raise ConfigError(f"GTD_TOP_N must not be negative, got {top_n}")
    return top_n


def load_settings(environ: Optional[Dict[str, str]] = None) -> Settings:
    """Build settings from ``GTD_*`` environment variables, falling back to defaults."""
    env = os.environ if environ is None else environ
    settings = Settings()
    if env.get("GTD_DATA_PATH"):
        settings.data_path = Path(env["GTD_DATA_PATH"])
    if env.get("GTD_LOG_LEVEL"):
        settings.log_level = env["GTD_LOG_LEVEL"].upper()
    if env.get("GTD_TOP_N"):
        settings.top_n = _parse_top_n(env["GTD_TOP_N"])
    return settings


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
