"""Export/list filter parsing and export filename derivation."""

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import TypeVar

from buyer_api.models.enums import City, PropertyType, Status, Timeline

# Columns searched (case-insensitive substring, OR-combined) by the free-text term
SEARCH_FIELDS: list[str] = ["fullName", "phone", "email", "city", "propertyType", "status", "source", "notes"]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class BuyerFilters:
    """Search term plus exact-match filters, validated against the closed sets."""

    search: str | None = None
    city: City | None = None
    property_type: PropertyType | None = None
    status: Status | None = None
    timeline: Timeline | None = None


E = TypeVar("E", bound=StrEnum)


def _parse_member(enum_cls: type[E], value: str | None, label: str) -> E | None:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        msg = f"Invalid {label} value: {value!r}"
        raise ValueError(msg) from None


def parse_filters(
    *,
    search: str | None = None,
    city: str | None = None,
    property_type: str | None = None,
    status: str | None = None,
    timeline: str | None = None,
) -> BuyerFilters:
    """Validate raw query-string filter values.

    Blank values are treated as absent.

    Raises:
        ValueError: If a filter value is not a member of its closed set.
    """
    return BuyerFilters(
        search=(search or "").strip() or None,
        city=_parse_member(City, city, "city"),
        property_type=_parse_member(PropertyType, property_type, "property type"),
        status=_parse_member(Status, status, "status"),
        timeline=_parse_member(Timeline, timeline, "timeline"),
    )


def export_filename(filters: BuyerFilters, today: date | None = None) -> str:
    """Derive ``buyers-export-<date>[-<filter parts>].csv`` from the active filters.

    Runs of characters outside ``[A-Za-z0-9._-]`` in the search term become ``_``.
    """
    day = today or datetime.now(UTC).date()
    parts = []
    if filters.search:
        parts.append(f"search-{_UNSAFE_FILENAME_CHARS.sub('_', filters.search)}")
    if filters.city:
        parts.append(f"city-{filters.city.value}")
    if filters.property_type:
        parts.append(f"type-{filters.property_type.value}")
    if filters.status:
        parts.append(f"status-{filters.status.value}")
    if filters.timeline:
        parts.append(f"timeline-{filters.timeline.value}")

    suffix = f"-{'-'.join(parts)}" if parts else ""
    return f"buyers-export-{day.isoformat()}{suffix}.csv"
