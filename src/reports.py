"""Plain-text county reports built from ranked records."""

from __future__ import annotations

from typing import Dict

from .config import REPORT_HEADLINE, REPORT_RANK, REPORT_SHARE, STATE_NAME
from .records import DerivedRecord, RecordSet


def render_report(
    record: DerivedRecord,
    total_units: int,
    period_label: str = "over the reporting period",
    state_name: str = STATE_NAME,
) -> str:
    """Fill the sentence templates for one county.

    Parameters
    ----------
    record : DerivedRecord
        The county's ranked record.
    total_units : int
        Number of counties in the ranking (used in the rank sentence).
    period_label : str
        Phrase describing the claims window, e.g. ``"since March 14"``.
    """
    values = {
        "unit_key": record.unit_key,
        "total": round(record.total),
        "labor_force": round(record.labor_force),
        "percent": record.percent,
        "ordinal_label": record.ordinal_label,
        "total_units": total_units,
        "state_name": state_name,
        "period_label": period_label,
    }
    sentences = (REPORT_HEADLINE, REPORT_SHARE, REPORT_RANK)
    return " ".join(template.format(**values) for template in sentences)


def render_reports(
    record_set: RecordSet, period_label: str = "over the reporting period"
) -> Dict[str, str]:
    """Return ``{unit_key: report text}`` for every county in rank order."""
    total_units = len(record_set)
    return {
        record.unit_key: render_report(record, total_units, period_label)
        for record in record_set.records()
    }
