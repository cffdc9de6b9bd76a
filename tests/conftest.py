"""Shared pytest fixtures for the county claims ranking tests.

Provides:
- observations: weekly claims for three counties, with suffixed names
- laborforce: one period of labor force for the same counties plus a state row
- write_csvs: writes both tables as raw CSVs under tmp_path
"""

import pandas as pd
import pytest


@pytest.fixture
def observations() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "unit_key": [
                "Adams County, NE",
                "Adams County, NE",
                "Buffalo County, NE",
                "Cass County, NE",
                "Cass County, NE",
            ],
            "period": ["2020-03-21", "2020-03-28", "2020-03-21", "2020-03-21", "2020-03-28"],
            "value": [40, 60, 50, 120, 80],
        }
    )


@pytest.fixture
def laborforce() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "unit_key": ["Adams", "Buffalo", "Cass", "Nebraska"],
            "state_code": ["31", "31", "31", "31"],
            "county_code": ["001", "019", "025", "000"],
            "labor_force": [1000, 1000, 1000, None],
            "period": ["2020-03"] * 4,
        }
    )


@pytest.fixture
def write_csvs(tmp_path):
    """Write raw claims and labor-force CSVs; returns their paths."""

    def _write(claims_rows, laborforce_rows):
        claims_path = tmp_path / "claims.csv"
        lf_path = tmp_path / "laborforce.csv"
        pd.DataFrame(claims_rows, columns=["County", "Week Ending", "Claims"]).to_csv(
            claims_path, index=False
        )
        pd.DataFrame(
            laborforce_rows,
            columns=["County", "State FIPS", "County FIPS", "Period", "Labor Force"],
        ).to_csv(lf_path, index=False)
        return claims_path, lf_path

    return _write
