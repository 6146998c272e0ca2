"""Client-side filtering of projected rows.

Filtering runs on rows that were already fetched; it never pages or re-queries
the API. Every populated criterion must hold for a row to be kept, and an
unset criterion never excludes anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Mapping, Sequence, TypeVar

from KubeConsole.models.base import DisplayRow, to_datetime

log = logging.getLogger(__name__)

R = TypeVar("R", bound=DisplayRow)

FilterKind = Literal["namespace", "text", "time_range"]


@dataclass(frozen=True)
class FilterField:
    """Describes one input of a page's filter form."""

    key: str
    label: str
    kind: FilterKind
    placeholder: str = ""


NAMESPACE_FILTER = FilterField(
    key="namespace",
    label="Namespace",
    kind="namespace",
    placeholder="Please select namespace",
)
NAME_FILTER = FilterField(
    key="name", label="Name", kind="text", placeholder="Please enter name"
)
CREATION_TIME_FILTER = FilterField(
    key="creationTimestamp",
    label="Creation time",
    kind="time_range",
    placeholder="YYYY-MM-DD HH:MM:SS",
)


@dataclass(frozen=True)
class TimeRange:
    """An inclusive interval of instants."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    @classmethod
    def parse(cls, value: Any) -> TimeRange | None:
        """
        Builds a range from a (start, end) pair of timestamps.

        Malformed input is logged and yields None, which leaves the
        creation-time criterion unset instead of failing the row computation.
        """
        if value is None or value == "" or isinstance(value, TimeRange):
            return value or None
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            log.warning("Ignoring malformed creation time range: %r", value)
            return None
        if len(value) != 2:
            log.warning("Ignoring creation time range without two ends: %r", value)
            return None

        start, end = (to_datetime(_normalize_bound(v)) for v in value)
        if start is None or end is None:
            log.warning("Ignoring unparsable creation time range: %r", value)
            return None
        return cls(start=start, end=end)


def _normalize_bound(value: Any) -> Any:
    # The form renders bounds as "YYYY-MM-DD HH:MM:SS".
    if isinstance(value, str):
        return value.strip().replace(" ", "T", 1)
    return value


@dataclass(frozen=True)
class FilterCriteria:
    """The filter form state. Every field left as None adds no constraint."""

    namespaces: tuple[str, ...] | None = None
    name: str | None = None
    time_range: TimeRange | None = None

    def is_empty(self) -> bool:
        return not self.namespaces and not self.name and self.time_range is None

    @classmethod
    def from_form(cls, values: Mapping[str, Any] | None) -> FilterCriteria:
        """Builds criteria from raw form values keyed by filter field key."""
        if not values:
            return cls()

        namespace_value = values.get(NAMESPACE_FILTER.key)
        if isinstance(namespace_value, str):
            namespaces: tuple[str, ...] | None = (namespace_value,)
        elif namespace_value:
            namespaces = tuple(str(ns) for ns in namespace_value)
        else:
            namespaces = None

        name_value = values.get(NAME_FILTER.key)
        name = str(name_value) if name_value else None

        time_range = TimeRange.parse(values.get(CREATION_TIME_FILTER.key))

        return cls(namespaces=namespaces or None, name=name, time_range=time_range)

    def merged_with(self, other: FilterCriteria) -> FilterCriteria:
        """Returns criteria where fields populated in `other` take precedence."""
        return FilterCriteria(
            namespaces=other.namespaces if other.namespaces else self.namespaces,
            name=other.name if other.name else self.name,
            time_range=other.time_range if other.time_range else self.time_range,
        )


def namespace_matches(row: DisplayRow, namespaces: Sequence[str] | None) -> bool:
    if not namespaces:
        return True
    # The all-namespaces option wins over any specific selection.
    return "" in namespaces or row.namespace in namespaces


def name_matches(row: DisplayRow, name: str | None) -> bool:
    if not name:
        return True
    return name in (row.name or "")


def created_within(row: DisplayRow, time_range: TimeRange | None) -> bool:
    if time_range is None:
        return True
    if row.created_at is None:
        return False
    return time_range.contains(row.created_at)


def matches(row: DisplayRow, criteria: FilterCriteria) -> bool:
    return (
        namespace_matches(row, criteria.namespaces)
        and name_matches(row, criteria.name)
        and created_within(row, criteria.time_range)
    )


def filter_rows(rows: Sequence[R], criteria: FilterCriteria | None) -> Sequence[R]:
    """
    Returns the rows that satisfy every populated criterion, in input order.

    With no criterion populated the input sequence itself is returned.
    """
    if criteria is None or criteria.is_empty():
        return rows
    kept = [row for row in rows if matches(row, criteria)]
    log.debug("Filtered %d rows down to %d", len(rows), len(kept))
    return kept
