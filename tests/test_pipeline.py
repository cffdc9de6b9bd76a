"""Tests for joining, percent computation and ranking."""

import logging

import pandas as pd
import pytest

from src.aggregate import aggregate_claims
from src.errors import ConfigurationError, UnsupportedRangeError
from src.models import LaborForceRecord, UnitTotal
from src.pipeline import build_record_set, run_pipeline


def _lf(keys, labor_force=None):
    labor_force = labor_force or [1000] * len(keys)
    return pd.DataFrame(
        {
            "unit_key": keys,
            "state_code": ["31"] * len(keys),
            "county_code": [f"{i:03d}" for i in range(1, 2 * len(keys), 2)],
            "labor_force": labor_force,
            "period": ["2020-03"] * len(keys),
        }
    )


def _totals(keys, totals):
    return pd.DataFrame({"unit_key": keys, "total": totals})


# ===================================================================
# Ranking
# ===================================================================


class TestBuildRecordSet:
    def test_three_unit_round_trip(self):
        result = build_record_set(_totals(["A", "B", "C"], [100, 50, 200]), _lf(["A", "B", "C"]))

        assert [(r.unit_key, r.rank, r.percent, r.ordinal_label) for r in result] == [
            ("C", 1, 20.0, "first"),
            ("A", 2, 10.0, "second"),
            ("B", 3, 5.0, "third"),
        ]

    def test_composite_id_attached(self):
        result = build_record_set(_totals(["A", "B"], [1, 2]), _lf(["A", "B"]))
        assert result.lookup("A").composite_id == "31001"
        assert result.lookup("B").composite_id == "31003"

    def test_from_aggregated_observations(self, observations, laborforce):
        result = build_record_set(aggregate_claims(observations), laborforce)

        assert [r.unit_key for r in result] == ["Cass", "Adams", "Buffalo"]
        assert result.lookup("Cass").total == 200.0
        assert "Nebraska" not in result

    def test_accepts_dataclass_rows(self):
        totals = [UnitTotal("A", 30), UnitTotal("B", 60)]
        laborforce = [
            LaborForceRecord("A", ("31", "001"), 600),
            LaborForceRecord("B", ("31", "003"), 600),
        ]
        result = build_record_set(totals, laborforce)
        assert [(r.unit_key, r.percent) for r in result] == [("B", 10.0), ("A", 5.0)]

    def test_idempotent(self):
        totals = _totals(["A", "B", "C"], [100, 50, 200])
        laborforce = _lf(["A", "B", "C"])
        assert build_record_set(totals, laborforce) == build_record_set(totals, laborforce)

    def test_percent_non_increasing_and_ranks_dense(self):
        keys = [f"U{i}" for i in range(30)]
        totals = _totals(keys, [(i * 37) % 11 + 1 for i in range(30)])
        result = build_record_set(totals, _lf(keys, [100 + i for i in range(30)]))

        percents = [r.percent for r in result]
        assert all(a >= b for a, b in zip(percents, percents[1:]))
        assert [r.rank for r in result] == list(range(1, 31))

    def test_ties_keep_join_order(self):
        totals = _totals(["Zeta", "Alpha", "Mid"], [10, 10, 50])
        result = build_record_set(totals, _lf(["Alpha", "Mid", "Zeta"]))

        assert [(r.unit_key, r.rank) for r in result] == [("Mid", 1), ("Zeta", 2), ("Alpha", 3)]
        assert result.lookup("Zeta").percent == result.lookup("Alpha").percent

    def test_rounded_ties_get_distinct_ranks(self):
        # 10.04% and 10.01% both round to 10.0
        totals = _totals(["A", "B"], [1004, 1001])
        result = build_record_set(totals, _lf(["A", "B"], [10000, 10000]))
        assert [r.percent for r in result] == [10.0, 10.0]
        assert [r.ordinal_label for r in result] == ["first", "second"]

    @pytest.mark.parametrize(
        ("total", "labor_force", "expected"),
        [(1, 3, 33.3), (2, 3, 66.7), (1, 8, 12.5), (1, 16, 6.2), (3, 16, 18.8)],
    )
    def test_percent_rounding(self, total, labor_force, expected):
        result = build_record_set(_totals(["A"], [total]), _lf(["A"], [labor_force]))
        assert result.lookup("A").percent == expected

    def test_zero_labor_force_excluded(self):
        result = build_record_set(_totals(["A", "B"], [5, 5]), _lf(["A", "B"], [0, 100]))

        assert "A" not in result
        assert [r.unit_key for r in result] == ["B"]
        assert result.lookup("B").percent == 5.0

    def test_negative_and_missing_labor_force_excluded(self):
        result = build_record_set(
            _totals(["A", "B", "C"], [5, 5, 5]), _lf(["A", "B", "C"], [-10, None, 50])
        )
        assert [r.unit_key for r in result] == ["C"]

    def test_unmatched_rows_dropped_and_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="src.pipeline"):
            result = build_record_set(_totals(["A", "OnlyClaims"], [5, 5]), _lf(["A", "OnlyLF"]))

        assert [r.unit_key for r in result] == ["A"]
        assert "OnlyClaims" in caplog.text
        assert "OnlyLF" in caplog.text

    def test_join_is_case_sensitive(self):
        result = build_record_set(_totals(["adams"], [5]), _lf(["Adams"]))
        assert len(result) == 0

    def test_empty_inputs_give_empty_record_set(self):
        assert len(build_record_set([], [])) == 0
        assert len(build_record_set(_totals([], []), _lf(["A"]))) == 0

    def test_ninety_nine_units_supported(self):
        keys = [f"U{i:03d}" for i in range(99)]
        result = build_record_set(_totals(keys, list(range(1, 100))), _lf(keys))
        assert result.records()[-1].ordinal_label == "99th"

    def test_one_hundred_units_abort_build(self):
        keys = [f"U{i:03d}" for i in range(100)]
        with pytest.raises(UnsupportedRangeError):
            build_record_set(_totals(keys, list(range(1, 101))), _lf(keys))

    def test_malformed_county_code_raises_before_join(self):
        laborforce = _lf(["A"])
        laborforce["county_code"] = ["55"]
        with pytest.raises(ConfigurationError):
            build_record_set(_totals(["Unrelated"], [5]), laborforce)

    def test_duplicate_laborforce_keys_raise(self):
        with pytest.raises(ConfigurationError):
            build_record_set(_totals(["A"], [5]), _lf(["A", "A"]))

    def test_state_row_without_labor_force_not_validated(self, laborforce):
        laborforce.loc[laborforce["unit_key"] == "Nebraska", "county_code"] = None
        result = build_record_set(_totals(["Adams"], [10]), laborforce)
        assert [r.unit_key for r in result] == ["Adams"]


# ===================================================================
# Driver
# ===================================================================


class TestRunPipeline:
    def test_runs_from_csv_sources(self, write_csvs):
        claims_path, lf_path = write_csvs(
            [
                ["Adams County, NE", "2020-03-21", "1,000"],
                ["Adams County, NE", "2020-03-28", "500"],
                ["Buffalo County, NE", "2020-03-21", "300"],
            ],
            [
                ["Adams", "31", "001", "2020-02", "20,000"],
                ["Buffalo", "31", "019", "2020-02", "1"],
                ["Adams", "31", "001", "2020-03", "10,000"],
                ["Buffalo", "31", "019", "2020-03", "10,000"],
            ],
        )
        payload = run_pipeline(claims_source=claims_path, laborforce_source=lf_path)

        records = payload["records"]
        assert payload["period"] == "2020-03"
        assert [(r.unit_key, r.percent, r.composite_id) for r in records] == [
            ("Adams", 15.0, "31001"),
            ("Buffalo", 3.0, "31019"),
        ]
        assert set(payload["claims"]["unit_key"]) == {"Adams", "Buffalo"}

    def test_explicit_period(self, write_csvs):
        claims_path, lf_path = write_csvs(
            [["Adams County, NE", "2020-03-21", "100"]],
            [
                ["Adams", "31", "001", "2020-02", "1000"],
                ["Adams", "31", "001", "2020-03", "2000"],
            ],
        )
        payload = run_pipeline(
            claims_source=claims_path, laborforce_source=lf_path, period="2020-02"
        )
        assert payload["records"].lookup("Adams").percent == 10.0
