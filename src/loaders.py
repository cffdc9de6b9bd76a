"""
CSV loaders for the weekly claims and monthly labor-force tables.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .config import (
    CLAIMS_COLUMNS,
    CLAIMS_SOURCE,
    DEFAULT_SEP,
    LABORFORCE_COLUMNS,
    LABORFORCE_SOURCE,
)
from .models import LABORFORCE_FIELDS, OBSERVATION_COLUMNS, ensure_columns

logger = logging.getLogger(__name__)


def _read_renamed(
    source: str | Path, columns: Dict[str, str], sep: str, **kwargs
) -> pd.DataFrame:
    raw = pd.read_csv(source, sep=sep, **kwargs)
    raw.columns = [str(col).strip() for col in raw.columns]
    ensure_columns(raw, list(columns))
    return raw.rename(columns=columns)[list(columns.values())]


def load_claims(source: str | Path = CLAIMS_SOURCE, sep: str = DEFAULT_SEP) -> pd.DataFrame:
    """Load weekly claims as RawObservation rows.

    Returns
    -------
    pd.DataFrame
        Columns ``unit_key``, ``period`` and ``value``.  Values are left as
        read; numeric coercion happens during aggregation.
    """
    df = _read_renamed(source, CLAIMS_COLUMNS, sep, thousands=",")
    logger.info("Loaded %d claim rows from %s", len(df), source)
    return df[OBSERVATION_COLUMNS]


def load_laborforce(
    source: str | Path = LABORFORCE_SOURCE, sep: str = DEFAULT_SEP
) -> pd.DataFrame:
    """Load labor-force estimates for every period in the file.

    The FIPS code columns are read as strings so leading zeros survive.
    """
    code_cols = [
        raw for raw, canonical in LABORFORCE_COLUMNS.items()
        if canonical in ("state_code", "county_code")
    ]
    df = _read_renamed(
        source,
        LABORFORCE_COLUMNS,
        sep,
        dtype={col: str for col in code_cols},
        thousands=",",
    )
    logger.info("Loaded %d labor-force rows from %s", len(df), source)
    return df[LABORFORCE_FIELDS]


def _period_order(periods: pd.Series) -> pd.Series:
    parsed = pd.to_datetime(periods, errors="coerce", format="mixed")
    if parsed.notna().all():
        return parsed
    return periods.astype(str)


def select_period(df: pd.DataFrame, period: Optional[str] = None) -> pd.DataFrame:
    """Return the rows for a single reporting period.

    Parameters
    ----------
    df : pd.DataFrame
        Labor-force rows with a ``period`` column.
    period : str, optional
        Period label to keep.  ``None`` selects the latest period, ordering
        labels as dates when they all parse and as text otherwise.

    Raises
    ------
    ValueError
        If ``period`` does not occur in the data.
    """
    ensure_columns(df, ["period"])
    if df.empty:
        return df.copy()

    labels = df["period"].astype(str).str.strip()
    if period is None:
        unique = pd.Series(labels.unique())
        latest_idx = _period_order(unique).sort_values(kind="stable").index[-1]
        period = unique.loc[latest_idx]
        logger.info("No period given; using latest labor-force period %s", period)

    mask = labels == str(period).strip()
    if not mask.any():
        available = sorted(labels.unique())
        raise ValueError(f"Period {period!r} not found; available periods: {available}")
    return df.loc[mask].reset_index(drop=True)
