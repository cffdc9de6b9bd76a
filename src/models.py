"""Input row types and conversion to the canonical DataFrame schemas.

The pipeline works on DataFrames internally; these dataclasses give
callers a typed way to hand rows in without building a frame first.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, List, Tuple, Union

import pandas as pd

OBSERVATION_COLUMNS: List[str] = ["unit_key", "period", "value"]
TOTAL_COLUMNS: List[str] = ["unit_key", "total"]
LABORFORCE_FIELDS: List[str] = [
    "unit_key",
    "state_code",
    "county_code",
    "labor_force",
    "period",
]


@dataclass(frozen=True)
class RawObservation:
    unit_key: str
    period: object
    value: object


@dataclass(frozen=True)
class LaborForceRecord:
    unit_key: str
    sub_keys: Tuple[str, str]
    labor_force: object
    period: object = None

    def as_row(self) -> dict:
        state_code, county_code = self.sub_keys
        return {
            "unit_key": self.unit_key,
            "state_code": state_code,
            "county_code": county_code,
            "labor_force": self.labor_force,
            "period": self.period,
        }


@dataclass(frozen=True)
class UnitTotal:
    unit_key: str
    total: float


FrameLike = Union[pd.DataFrame, Iterable]


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")


def to_frame(rows: FrameLike, columns: List[str]) -> pd.DataFrame:
    """Return ``rows`` as a DataFrame restricted to ``columns``.

    ``rows`` may already be a DataFrame or any iterable of the dataclasses
    above.  The result is always a copy, so callers can add columns freely.
    """
    if isinstance(rows, pd.DataFrame):
        ensure_columns(rows, columns)
        return rows[columns].copy()

    records = []
    for row in rows:
        if isinstance(row, LaborForceRecord):
            records.append(row.as_row())
        else:
            records.append(asdict(row))
    return pd.DataFrame.from_records(records, columns=columns)
