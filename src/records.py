"""The ranked per-county record set handed to report, chart and map code."""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class DerivedRecord:
    """One county after joining, ranking and labelling."""

    unit_key: str
    composite_id: str
    total: float
    labor_force: float
    percent: float
    rank: int
    ordinal_label: str


RECORD_COLUMNS = [f.name for f in fields(DerivedRecord)]


class RecordSet:
    """Immutable, rank-ordered collection of :class:`DerivedRecord`.

    Records are stored in rank order (highest percent first).  Lookup by
    ``unit_key`` goes through a read-only index built once at construction.
    """

    __slots__ = ("_records", "_index")

    def __init__(self, records: Iterable[DerivedRecord] = ()) -> None:
        ordered = tuple(records)
        index = {}
        for record in ordered:
            if record.unit_key in index:
                raise ValueError(f"Duplicate unit_key in record set: {record.unit_key!r}")
            index[record.unit_key] = record
        object.__setattr__(self, "_records", ordered)
        object.__setattr__(self, "_index", MappingProxyType(index))

    def __setattr__(self, name, value):
        raise AttributeError("RecordSet is immutable; rebuild it instead.")

    def records(self) -> Tuple[DerivedRecord, ...]:
        return self._records

    def lookup(self, unit_key: str) -> DerivedRecord:
        """Return the record for ``unit_key``; raises ``KeyError`` if absent."""
        return self._index[unit_key]

    def get(self, unit_key: str, default: Optional[DerivedRecord] = None):
        return self._index.get(unit_key, default)

    @property
    def index(self) -> Mapping[str, DerivedRecord]:
        return self._index

    def to_frame(self) -> pd.DataFrame:
        """Return the records as a new DataFrame, one row per county."""
        return pd.DataFrame(
            [astuple(record) for record in self._records], columns=RECORD_COLUMNS
        )

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DerivedRecord]:
        return iter(self._records)

    def __contains__(self, unit_key: object) -> bool:
        return unit_key in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordSet):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"RecordSet({len(self._records)} records)"
