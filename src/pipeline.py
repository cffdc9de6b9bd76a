"""Core pipeline logic: join claim totals with labor force and rank counties.

This module orchestrates the two inputs of the ranking:

* Weekly unemployment-claim counts per county, summed across all weeks by
  :mod:`src.aggregate`.
* Labor-force estimates per county for a single reporting period.

The primary entry point is :func:`run_pipeline`, which loads both tables
and returns the ranked :class:`~src.records.RecordSet` together with the
intermediate frames the chart and report code needs.  The ranking itself
lives in :func:`build_record_set`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd

from .aggregate import aggregate_claims, prepare_observations
from .config import CLAIMS_SOURCE, DEFAULT_SEP, LABORFORCE_SOURCE, PERCENT_DECIMALS
from .errors import ConfigurationError, PipelineError
from .keys import build_composite_id, normalize_claims_key
from .loaders import load_claims, load_laborforce, select_period
from .models import LABORFORCE_FIELDS, TOTAL_COLUMNS, FrameLike, to_frame
from .ordinal import format_ordinal
from .records import DerivedRecord, RecordSet

# Module‑level logger
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _positive_finite(series: pd.Series) -> pd.Series:
    values = pd.to_numeric(series, errors="coerce").astype(float)
    return values.notna() & np.isfinite(values) & (values > 0)


def _reject_duplicates(df: pd.DataFrame, what: str) -> None:
    dupes = df.loc[df["unit_key"].duplicated(), "unit_key"].unique().tolist()
    if dupes:
        raise ConfigurationError(f"Duplicate unit keys in {what}: {dupes}")


def prepare_totals(totals: FrameLike) -> pd.DataFrame:
    """Return claim totals keyed by unit, dropping invalid totals."""
    df = to_frame(totals, TOTAL_COLUMNS)
    df = df.loc[df["unit_key"].notna()].copy()
    df["unit_key"] = df["unit_key"].map(normalize_claims_key).astype(str)
    _reject_duplicates(df, "claim totals")

    valid = _positive_finite(df["total"])
    if not valid.all():
        logger.info(
            "Dropping %d counties with invalid totals: %s",
            int((~valid).sum()),
            df.loc[~valid, "unit_key"].tolist(),
        )
    df = df.loc[valid].copy()
    df["total"] = df["total"].astype(float)
    return df.reset_index(drop=True)


def prepare_laborforce(laborforce: FrameLike) -> pd.DataFrame:
    """Return one labor-force row per county with its composite id.

    Rows whose labor force is missing, zero or negative are dropped first;
    these are the state and non-county summary rows of the source table.
    Composite ids are then built for every remaining row, so a malformed
    code raises :class:`ConfigurationError` before any join happens.
    """
    df = to_frame(laborforce, LABORFORCE_FIELDS)
    df = df.loc[df["unit_key"].notna()].copy()
    df["unit_key"] = df["unit_key"].map(normalize_claims_key).astype(str)

    valid = _positive_finite(df["labor_force"])
    if not valid.all():
        logger.info(
            "Dropping %d labor-force rows with non-positive labor force: %s",
            int((~valid).sum()),
            df.loc[~valid, "unit_key"].tolist(),
        )
    df = df.loc[valid].copy()
    df["labor_force"] = pd.to_numeric(df["labor_force"]).astype(float)

    _reject_duplicates(df, "labor-force slice")
    df["composite_id"] = [
        build_composite_id(state, county)
        for state, county in zip(df["state_code"], df["county_code"])
    ]
    return df[["unit_key", "composite_id", "labor_force"]].reset_index(drop=True)


def join_totals(totals: pd.DataFrame, laborforce: pd.DataFrame) -> pd.DataFrame:
    """Inner-join totals with labor force on ``unit_key``.

    Counties present on only one side are logged and dropped.  The result
    keeps the row order of ``totals``.
    """
    claims_only = sorted(set(totals["unit_key"]) - set(laborforce["unit_key"]))
    lf_only = sorted(set(laborforce["unit_key"]) - set(totals["unit_key"]))
    if claims_only:
        logger.info("No labor-force match for %d counties: %s", len(claims_only), claims_only)
    if lf_only:
        logger.info("No claims match for %d counties: %s", len(lf_only), lf_only)

    return totals.merge(laborforce, on="unit_key", how="inner", validate="one_to_one")


def add_percent(joined: pd.DataFrame) -> pd.DataFrame:
    """Add ``percent`` = 100 * total / labor_force, rounded half-to-even."""
    out = joined.loc[joined["labor_force"] > 0].copy()
    out["percent"] = (100.0 * out["total"] / out["labor_force"]).round(PERCENT_DECIMALS)
    if not np.isfinite(out["percent"]).all():
        raise PipelineError("Non-finite percent after excluding empty labor force.")
    return out


def rank_records(scored: pd.DataFrame) -> RecordSet:
    """Sort by percent and attach dense ranks and ordinal labels.

    Equal percents keep their incoming order (stable sort) and still get
    consecutive, distinct ranks.  A rank past the ordinal table raises
    :class:`~src.errors.UnsupportedRangeError` and no record set is returned.
    """
    ranked = scored.sort_values("percent", ascending=False, kind="stable")
    records = (
        DerivedRecord(
            unit_key=row.unit_key,
            composite_id=row.composite_id,
            total=float(row.total),
            labor_force=float(row.labor_force),
            percent=float(row.percent),
            rank=rank,
            ordinal_label=format_ordinal(rank),
        )
        for rank, row in enumerate(ranked.itertuples(index=False), start=1)
    )
    return RecordSet(records)


def build_record_set(totals: FrameLike, laborforce: FrameLike) -> RecordSet:
    """Join claim totals with one period of labor force and rank counties.

    Parameters
    ----------
    totals : DataFrame or iterable of UnitTotal
        Claim totals per county, typically from
        :func:`src.aggregate.aggregate_claims`.
    laborforce : DataFrame or iterable of LaborForceRecord
        Labor-force rows for a single period.

    Returns
    -------
    RecordSet
        Counties ordered by percent (highest first), ranked 1..N.
    """
    totals_df = prepare_totals(totals)
    lf_df = prepare_laborforce(laborforce)
    joined = join_totals(totals_df, lf_df)
    scored = add_percent(joined)
    record_set = rank_records(scored)
    logger.info("Ranked %d counties", len(record_set))
    return record_set


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


def run_pipeline(
    *,
    claims_source: str | Path = CLAIMS_SOURCE,
    laborforce_source: str | Path = LABORFORCE_SOURCE,
    period: Optional[str] = None,
    sep: str = DEFAULT_SEP,
) -> Dict[str, object]:
    """Run the full pipeline from the two CSV sources.

    Parameters
    ----------
    claims_source, laborforce_source : str or Path, optional
        Locations of the weekly claims and labor-force CSVs.
    period : str, optional
        Labor-force period to rank against; latest period when ``None``.
    sep : str, optional
        Column delimiter for both CSVs.

    Returns
    -------
    Dict[str, object]
        ``"claims"`` (normalized weekly observations), ``"totals"``,
        ``"laborforce"`` (the selected period slice), ``"period"`` and
        ``"records"`` (the :class:`RecordSet`).
    """
    # 1. Load raw inputs
    claims = load_claims(claims_source, sep=sep)
    laborforce_all = load_laborforce(laborforce_source, sep=sep)

    # 2. Restrict labor force to a single period
    laborforce = select_period(laborforce_all, period)
    selected = str(laborforce["period"].iloc[0]) if not laborforce.empty else period

    # 3. Aggregate and rank
    totals = aggregate_claims(claims)
    records = build_record_set(totals, laborforce)

    return {
        "claims": prepare_observations(claims),
        "totals": totals,
        "laborforce": laborforce,
        "period": selected,
        "records": records,
    }
