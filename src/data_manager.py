"""Writing pipeline artifacts to disk.

This module takes a finished pipeline payload (see
:func:`src.pipeline.run_pipeline`) and persists the per-county artifacts:
the ranked record table, one text report and one chart per county, and
the state map.  Every file is written to a temporary sibling first and
renamed into place, so an interrupted run never leaves a half-written
artifact behind.
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from functools import lru_cache
from typing import Dict, Optional

import pandas as pd
import plotly.graph_objects as go

from . import pipeline
from .config import CLAIMS_SOURCE, LABORFORCE_SOURCE
from .errors import ConfigurationError
from .plotting import create_choropleth_map, create_claims_chart
from .records import RecordSet
from .reports import render_reports

logger = logging.getLogger(__name__)


def _resolve_output_dir(override: Optional[str | Path] = None) -> Path:
    """Select a writable directory for artifacts.

    The lookup order is:

    1. ``override``, if given.
    2. The ``OUTPUT_DIR`` environment variable, if set.
    3. An ``output`` folder at the repository root.
    4. A temporary directory in ``/tmp``.

    Each candidate path is tested for writability by attempting to
    create and delete a sentinel file.  The first path that succeeds
    is returned.
    """
    candidates: list[Path] = []
    if override is not None:
        candidates.append(Path(override).expanduser().resolve())
    env = os.getenv("OUTPUT_DIR")
    if env:
        candidates.append(Path(env).expanduser().resolve())

    # Repo root /output (two levels up from this file)
    candidates.append(Path(__file__).resolve().parent.parent / "output")
    candidates.append(Path(tempfile.gettempdir()) / "county_claims_output")

    for path in candidates:
        try:
            path.mkdir(parents=True, exist_ok=True)
            test_file = path / ".write_test"
            test_file.write_text("ok", encoding="utf-8")
            test_file.unlink()
            return path
        except OSError as exc:
            logger.warning("Output directory %s is not writable: %s", path, exc)

    # Final fallback: ensure the last candidate exists
    fallback = candidates[-1]
    fallback.mkdir(parents=True, exist_ok=True)
    return fallback


def slugify(unit_key: str) -> str:
    """File-name friendly form of a county name (``"Box Butte"`` -> ``"box_butte"``)."""
    return re.sub(r"[^a-z0-9]+", "_", unit_key.lower()).strip("_")


def _artifact_slugs(record_set: RecordSet) -> Dict[str, str]:
    """Map each county to its file slug; distinct counties must not share one."""
    slugs: Dict[str, str] = {}
    owners: Dict[str, str] = {}
    for record in record_set.records():
        slug = slugify(record.unit_key)
        if slug in owners:
            raise ConfigurationError(
                f"Counties {owners[slug]!r} and {record.unit_key!r} "
                f"share the artifact name {slug!r}."
            )
        owners[slug] = record.unit_key
        slugs[record.unit_key] = slug
    return slugs


def _atomic_write_text(text: str, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(text, encoding="utf-8")
    tmp_path.replace(path)


def _atomic_to_csv(df: pd.DataFrame, path: Path) -> None:
    """Write a DataFrame to CSV atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    df.to_csv(tmp_path, index=False)
    tmp_path.replace(path)


def _atomic_write_html(fig: go.Figure, path: Path) -> None:
    _atomic_write_text(fig.to_html(include_plotlyjs="cdn", full_html=True), path)


def write_artifacts(
    payload: Dict[str, object],
    out_dir: Optional[str | Path] = None,
    *,
    geojson: Optional[dict] = None,
    period_label: str = "over the reporting period",
) -> Dict[str, Path]:
    """
    Persist the record table, reports, charts and (optionally) the map.

    Parameters
    ----------
    payload : Dict[str, object]
        Output of :func:`src.pipeline.run_pipeline`; needs ``"records"``
        and ``"claims"``.
    out_dir : str or Path, optional
        Target directory; resolved with :func:`_resolve_output_dir`.
    geojson : dict, optional
        County polygons; the map is skipped when not given.
    period_label : str
        Phrase used in the report headline.

    Returns
    -------
    Dict[str, Path]
        Locations of the ``"records"`` table, the ``"reports"`` and
        ``"charts"`` folders and, when written, the ``"map"``.
    """
    record_set: RecordSet = payload["records"]
    claims: pd.DataFrame = payload["claims"]
    slugs = _artifact_slugs(record_set)
    root = _resolve_output_dir(out_dir)

    paths: Dict[str, Path] = {
        "records": root / "records.csv",
        "reports": root / "reports",
        "charts": root / "charts",
    }
    _atomic_to_csv(record_set.to_frame(), paths["records"])

    for unit_key, text in render_reports(record_set, period_label).items():
        _atomic_write_text(text + "\n", paths["reports"] / f"{slugs[unit_key]}.txt")

    for record in record_set.records():
        fig = create_claims_chart(claims, record)
        _atomic_write_html(fig, paths["charts"] / f"{slugs[record.unit_key]}.html")

    if geojson is not None:
        paths["map"] = root / "map.html"
        _atomic_write_html(create_choropleth_map(record_set, geojson), paths["map"])

    logger.info("Wrote artifacts for %d counties to %s", len(record_set), root)
    return paths


@lru_cache(maxsize=1)
def load_payload(
    claims_source: str = CLAIMS_SOURCE,
    laborforce_source: str = LABORFORCE_SOURCE,
    period: Optional[str] = None,
) -> Dict[str, object]:
    """Run the pipeline once per argument set and keep the result in memory."""
    logger.info("Computing pipeline payload from %s and %s", claims_source, laborforce_source)
    return pipeline.run_pipeline(
        claims_source=claims_source,
        laborforce_source=laborforce_source,
        period=period,
    )
