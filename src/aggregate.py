"""Collapse weekly claim observations into one total per county."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .keys import normalize_claims_key
from .models import OBSERVATION_COLUMNS, TOTAL_COLUMNS, FrameLike, to_frame

logger = logging.getLogger(__name__)


def prepare_observations(observations: FrameLike) -> pd.DataFrame:
    """Return observations with canonical keys and numeric values.

    Unit keys are normalized with :func:`normalize_claims_key`; values are
    coerced with ``pd.to_numeric(errors="coerce")`` so unparseable entries
    become ``NaN``.  Only rows without a county name are dropped here.
    """
    df = to_frame(observations, OBSERVATION_COLUMNS)
    missing_key = df["unit_key"].isna()
    if missing_key.any():
        logger.info("Dropping %d claim rows without a county", int(missing_key.sum()))
        df = df.loc[~missing_key].copy()
    df["unit_key"] = df["unit_key"].map(normalize_claims_key).astype(str)
    df["value"] = pd.to_numeric(df["value"], errors="coerce").astype(float)
    return df


def aggregate_claims(observations: FrameLike) -> pd.DataFrame:
    """Sum claims per county across all periods.

    Parameters
    ----------
    observations : DataFrame or iterable of RawObservation
        Rows with ``unit_key``, ``period`` and ``value``.

    Returns
    -------
    pd.DataFrame
        Columns ``unit_key`` and ``total``, one row per county whose total
        is a positive finite number.  Non-numeric values are excluded from
        the sum rather than counted as zero.
    """
    df = prepare_observations(observations)

    valid = df["value"].notna() & np.isfinite(df["value"])
    n_invalid = int((~valid).sum())
    if n_invalid:
        logger.info("Dropping %d claim rows with non-numeric values", n_invalid)
    df = df.loc[valid]

    totals = df.groupby("unit_key", as_index=False, sort=True)["value"].sum()
    totals = totals.rename(columns={"value": "total"})

    keep = np.isfinite(totals["total"]) & (totals["total"] > 0)
    dropped = totals.loc[~keep, "unit_key"].tolist()
    if dropped:
        logger.info("Dropping %d counties with non-positive totals: %s", len(dropped), dropped)

    return totals.loc[keep, TOTAL_COLUMNS].reset_index(drop=True)
