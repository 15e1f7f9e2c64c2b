"""Tests for gtd_charts.loader — reading the incident CSV."""

import pandas as pd
import pytest

from gtd_charts.config import DATA_PATH, REQUIRED_COLUMNS
from gtd_charts.errors import DataLoadError, GtdChartsError
from gtd_charts.loader import load_records, to_frame


class TestLoadRecords:
    def test_reads_required_columns_as_strings(self, csv_path):
        df = load_records(csv_path)
        assert list(df.columns) == REQUIRED_COLUMNS
        assert len(df) == 4
        assert df["iyear"].iloc[0] == "2001"
        assert df["nkill"].iloc[1] == "3"

    def test_empty_cells_stay_missing(self, csv_path):
        df = load_records(csv_path)
        assert pd.isna(df["country_txt"].iloc[3])
        assert pd.isna(df["targtype1_txt"].iloc[3])

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError, match="not found"):
            load_records(tmp_path / "nope.csv")

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "partial.csv"
        path.write_text("iyear,country_txt\n2001,A\n")
        with pytest.raises(DataLoadError, match="nkill"):
            load_records(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(DataLoadError):
            load_records(path)

    def test_error_hierarchy(self):
        assert issubclass(DataLoadError, GtdChartsError)

    def test_bundled_sample(self):
        df = load_records(DATA_PATH)
        assert len(df) == 31


class TestToFrame:
    def test_dataframe_passes_through(self):
        frame = pd.DataFrame({col: ["x"] for col in REQUIRED_COLUMNS})
        assert to_frame(frame) is frame

    def test_mappings_become_rows(self, scenario_records):
        frame = to_frame(scenario_records)
        assert len(frame) == 3
        assert frame["country_txt"].tolist() == ["A", "B", "A"]

    def test_absent_columns_are_filled(self):
        frame = to_frame([{"iyear": 2001}])
        assert set(REQUIRED_COLUMNS) <= set(frame.columns)
        assert pd.isna(frame["nkill"].iloc[0])

    def test_generator_input(self, scenario_records):
        frame = to_frame(r for r in scenario_records)
        assert len(frame) == 3
