"""Tests for gtd_charts.aggregate — yearly counts, country totals, co-occurrence."""

import numpy as np
import pandas as pd
import pytest

from gtd_charts.aggregate import (
    ChartData,
    CoOccurrence,
    aggregate,
    build_co_occurrence_matrix,
    group_count_by_year,
    top_countries_by_deaths,
)


def _record(year=2000, country="A", nkill="1", attack="Bombing", target="Military"):
    return {
        "iyear": year,
        "country_txt": country,
        "nkill": nkill,
        "attacktype1_txt": attack,
        "targtype1_txt": target,
    }


def _random_records(seed, n=200):
    rng = np.random.default_rng(seed)
    countries = ["A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "K", "L", None, ""]
    attacks = ["Bombing", "Armed Assault", "Kidnapping", None, ""]
    targets = ["Military", "Police", "Civilian", "Business", None]
    kills = ["0", "1", "2", "7", "", "n/a", None, "12.5"]
    return [
        _record(
            year=int(rng.integers(1970, 1980)),
            country=countries[rng.integers(len(countries))],
            nkill=kills[rng.integers(len(kills))],
            attack=attacks[rng.integers(len(attacks))],
            target=targets[rng.integers(len(targets))],
        )
        for _ in range(n)
    ]


# ── scenario ──────────────────────────────────────────────────────────

class TestScenario:
    def test_yearly_counts(self, scenario_records):
        result = group_count_by_year(scenario_records)
        assert result.to_dict(orient="records") == [{"year": 2001, "count": 2}, {"year": 2002, "count": 1}]

    def test_country_totals(self, scenario_records):
        result = top_countries_by_deaths(scenario_records)
        assert list(zip(result["country"], result["total"])) == [("A", 7), ("B", 3)]

    def test_labels_follow_encounter_order(self, scenario_records):
        result = build_co_occurrence_matrix(scenario_records)
        assert result.labels == ["Bombing", "Kidnapping", "Military", "Civilian"]

    def test_matrix_cells(self, scenario_records):
        result = build_co_occurrence_matrix(scenario_records)
        assert result.count("Bombing", "Military") == 1
        assert result.count("Bombing", "Civilian") == 1
        assert result.count("Kidnapping", "Civilian") == 1
        assert result.total == 3

    def test_aggregate_bundles_all_three(self, scenario_records):
        data = aggregate(scenario_records)
        assert isinstance(data, ChartData)
        assert len(data.yearly) == 2
        assert len(data.top_countries) == 2
        assert isinstance(data.co_occurrence, CoOccurrence)


# ── group_count_by_year ───────────────────────────────────────────────

class TestGroupCountByYear:
    def test_ascending_regardless_of_input_order(self):
        records = [_record(year=y) for y in (1999, 1970, 1985, 1970)]
        result = group_count_by_year(records)
        assert result["year"].tolist() == [1970, 1985, 1999]
        assert result["count"].tolist() == [2, 1, 1]

    def test_string_years_are_parsed(self):
        result = group_count_by_year([_record(year="2001"), _record(year="2001")])
        assert result.to_dict(orient="records") == [{"year": 2001, "count": 2}]

    def test_invalid_years_are_dropped(self, caplog):
        records = [_record(year="abc"), _record(year=None), _record(year=2001)]
        result = group_count_by_year(records)
        assert result["count"].sum() == 1
        assert "without a valid year" in caplog.text

    def test_empty_input(self):
        result = group_count_by_year([])
        assert result.empty
        assert list(result.columns) == ["year", "count"]

    def test_accepts_dataframe(self):
        frame = pd.DataFrame({"iyear": ["1990", "1991", "1990"]})
        result = group_count_by_year(frame)
        assert result["count"].tolist() == [2, 1]

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_years_unique_and_counts_sum_to_valid_records(self, seed):
        records = _random_records(seed)
        result = group_count_by_year(records)
        years = result["year"].tolist()
        assert years == sorted(set(years))
        assert result["count"].sum() == len(records)


# ── top_countries_by_deaths ───────────────────────────────────────────

class TestTopCountriesByDeaths:
    def test_truncates_to_n(self):
        records = [_record(country=f"C{i:02d}", nkill=str(i)) for i in range(15)]
        result = top_countries_by_deaths(records)
        assert len(result) == 10
        assert result["country"].iloc[0] == "C14"
        assert result["country"].iloc[-1] == "C05"

    def test_custom_n(self):
        records = [_record(country=c, nkill="1") for c in "ABCD"]
        assert len(top_countries_by_deaths(records, n=2)) == 2

    def test_zero_n_is_empty(self):
        records = [_record(country=c, nkill="1") for c in "ABC"]
        assert top_countries_by_deaths(records, n=0).empty

    def test_negative_n_rejected(self):
        records = [_record(country=c, nkill=str(i)) for i, c in enumerate("ABCDE")]
        with pytest.raises(ValueError, match="must not be negative"):
            top_countries_by_deaths(records, n=-2)

    def test_missing_countries_dropped(self):
        records = [_record(country=None, nkill="50"), _record(country="", nkill="40"), _record(country="A", nkill="1")]
        result = top_countries_by_deaths(records)
        assert result["country"].tolist() == ["A"]

    def test_invalid_fatalities_contribute_nothing(self):
        records = [_record(country="A", nkill="4"), _record(country="A", nkill="unknown"), _record(country="A", nkill=None)]
        result = top_countries_by_deaths(records)
        assert result["total"].tolist() == [4]

    def test_country_without_any_valid_count_totals_zero(self):
        records = [_record(country="A", nkill="3"), _record(country="B", nkill="")]
        result = top_countries_by_deaths(records)
        assert list(zip(result["country"], result["total"])) == [("A", 3), ("B", 0)]

    def test_ties_keep_encounter_order(self):
        records = [_record(country=c, nkill="5") for c in ("Zeta", "Alpha", "Mid")]
        result = top_countries_by_deaths(records)
        assert result["country"].tolist() == ["Zeta", "Alpha", "Mid"]

    @pytest.mark.parametrize("seed", [4, 5, 6])
    def test_sorted_and_totals_match_sums(self, seed):
        records = _random_records(seed)
        result = top_countries_by_deaths(records)
        totals = result["total"].tolist()
        assert len(result) <= 10
        assert totals == sorted(totals, reverse=True)
        for country, total in zip(result["country"], result["total"]):
            expected = sum(
                float(r["nkill"])
                for r in records
                if r["country_txt"] == country and r["nkill"] not in (None, "", "n/a")
            )
            assert total == pytest.approx(expected)


# ── build_co_occurrence_matrix ────────────────────────────────────────

class TestCoOccurrence:
    def test_records_missing_a_label_are_ignored(self):
        records = [
            _record(attack="Bombing", target="Military"),
            _record(attack="Bombing", target=None),
            _record(attack="", target="Police"),
        ]
        result = build_co_occurrence_matrix(records)
        assert result.labels == ["Bombing", "Military"]
        assert result.total == 1

    def test_label_shared_by_both_dimensions(self):
        records = [_record(attack="Unknown", target="Unknown"), _record(attack="Bombing", target="Unknown")]
        result = build_co_occurrence_matrix(records)
        assert result.labels == ["Unknown", "Bombing"]
        assert result.count("Unknown", "Unknown") == 1
        assert result.count("Bombing", "Unknown") == 1

    def test_repeated_pairs_accumulate(self):
        records = [_record(attack="Bombing", target="Police")] * 4
        result = build_co_occurrence_matrix(records)
        assert result.count("Bombing", "Police") == 4
        assert result.count("Police", "Bombing") == 0

    def test_empty_input(self):
        result = build_co_occurrence_matrix([])
        assert result.labels == []
        assert result.matrix.shape == (0, 0)

    @pytest.mark.parametrize("seed", [7, 8, 9])
    def test_square_and_sums_to_qualifying_records(self, seed):
        records = _random_records(seed)
        result = build_co_occurrence_matrix(records)
        qualifying = [r for r in records if r["attacktype1_txt"] and r["targtype1_txt"]]
        labels = {r["attacktype1_txt"] for r in qualifying} | {r["targtype1_txt"] for r in qualifying}
        assert result.matrix.shape == (len(labels), len(labels))
        assert result.total == len(qualifying)
        assert set(result.labels) == labels
