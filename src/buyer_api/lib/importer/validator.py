"""Buyer record validation rules.

Validates required fields, format constraints, closed enumerations, and the
two cross-field rules. Validation stops at the first violation so each
rejected record carries exactly one message.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

from email_validator import EmailNotValidError, validate_email

from buyer_api.core.errors import RecordValidationError
from buyer_api.lib.importer.parser import EXPECTED_COLUMN_COUNT, IMPORT_COLUMNS, parse_tags
from buyer_api.models.buyer import snapshot_from_columns
from buyer_api.models.enums import (
    BHK,
    UNIT_PROPERTY_TYPES,
    City,
    PropertyType,
    Purpose,
    Source,
    Status,
    Timeline,
)

# Check order decides which error surfaces when several required fields are blank
REQUIRED_FIELDS = ["fullName", "phone", "city", "propertyType", "purpose", "timeline", "source"]

FULL_NAME_MIN_LENGTH = 2
FULL_NAME_MAX_LENGTH = 80
NOTES_MAX_LENGTH = 1000

# Largest value a BIGINT budget column holds
BUDGET_MAX = 2**63 - 1

_PHONE_RE = re.compile(r"^\d{10,15}$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class BuyerCandidate:
    """A buyer as submitted, before validation. Field names mirror the wire names."""

    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    property_type: str | None = None
    bhk: str | None = None
    purpose: str | None = None
    budget_min: int | str | None = None
    budget_max: int | str | None = None
    timeline: str | None = None
    source: str | None = None
    status: str | None = None
    notes: str | None = None
    tags: Sequence[str] | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BuyerCandidate":
        """Build a candidate from a camelCase mapping, trimming string values."""
        raw_tags = data.get("tags")
        return cls(
            full_name=clean_text(data.get("fullName")),
            email=clean_text(data.get("email")),
            phone=clean_text(data.get("phone")),
            city=clean_text(data.get("city")),
            property_type=clean_text(data.get("propertyType")),
            bhk=clean_text(data.get("bhk")),
            purpose=clean_text(data.get("purpose")),
            budget_min=_clean_budget(data.get("budgetMin")),
            budget_max=_clean_budget(data.get("budgetMax")),
            timeline=clean_text(data.get("timeline")),
            source=clean_text(data.get("source")),
            status=clean_text(data.get("status")),
            notes=clean_text(data.get("notes")),
            tags=parse_tags(raw_tags) if isinstance(raw_tags, str) else raw_tags,
        )


@dataclass
class BuyerRecord:
    """A validated buyer with closed-enum values and defaults applied."""

    full_name: str
    phone: str
    city: City
    property_type: PropertyType
    purpose: Purpose
    timeline: Timeline
    source: Source
    status: Status = Status.NEW
    email: str | None = None
    bhk: BHK | None = None
    budget_min: int | None = None
    budget_max: int | None = None
    notes: str | None = None
    tags: list[str] = field(default_factory=list)

    def to_columns(self) -> dict[str, Any]:
        """Keyword arguments for the ORM ``Buyer`` constructor."""
        return {
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "city": self.city.value,
            "property_type": self.property_type.value,
            "bhk": self.bhk.value if self.bhk else None,
            "purpose": self.purpose.value,
            "budget_min": self.budget_min,
            "budget_max": self.budget_max,
            "timeline": self.timeline.value,
            "source": self.source.value,
            "status": self.status.value,
            "notes": self.notes,
            "tags": list(self.tags),
        }

    def to_snapshot(self) -> dict[str, Any]:
        """Business fields keyed by wire name."""
        return snapshot_from_columns(self.to_columns())


@dataclass(frozen=True)
class RowFailure:
    """Why one CSV data row was rejected."""

    row: int
    message: str


@dataclass
class RowScan:
    """Result of validating every data row of an import."""

    total_rows: int = 0
    valid: list[tuple[int, BuyerRecord]] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)


def clean_text(value: Any) -> str | None:
    """Trim a string value; blank strings and ``None`` become ``None``."""
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    return stripped or None


def _clean_budget(value: Any) -> int | str | None:
    """Coerce a budget to ``int`` when it is a whole number; leave anything else for the validator."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if _INTEGER_RE.match(stripped):
            return int(stripped)
        return stripped
    return value


def _fail(field_name: str, detail: str) -> RecordValidationError:
    return RecordValidationError(field_name, f"{field_name}: {detail}")


E = TypeVar("E", bound=StrEnum)


def _check_enum(field_name: str, enum_cls: type[E], value: Any) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise _fail(field_name, f"invalid value {value!r} (expected one of: {allowed})") from None


def _check_budget(field_name: str, value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise _fail(field_name, f"expected a whole number, got {value!r}")
    if value < 0:
        raise _fail(field_name, "must be a non-negative integer")
    if value > BUDGET_MAX:
        raise _fail(field_name, f"must be at most {BUDGET_MAX}")
    return value


def validate_record(candidate: BuyerCandidate) -> BuyerRecord:
    """Validate a single buyer candidate.

    Args:
        candidate: Submitted values, strings already trimmed.

    Returns:
        The normalized record (status defaults to ``New``, tags to ``[]``,
        blank optional fields to ``None``).

    Raises:
        RecordValidationError: For the first violated rule.
    """
    values = {
        "fullName": candidate.full_name,
        "phone": candidate.phone,
        "city": candidate.city,
        "propertyType": candidate.property_type,
        "purpose": candidate.purpose,
        "timeline": candidate.timeline,
        "source": candidate.source,
    }
    for field_name in REQUIRED_FIELDS:
        value = values[field_name]
        if value is None or (isinstance(value, str) and value.strip() == ""):
            raise RecordValidationError(field_name, f"{field_name} is required")

    full_name = str(candidate.full_name)
    if not FULL_NAME_MIN_LENGTH <= len(full_name) <= FULL_NAME_MAX_LENGTH:
        raise _fail("fullName", f"must be between {FULL_NAME_MIN_LENGTH} and {FULL_NAME_MAX_LENGTH} characters")

    email = candidate.email or None
    if email is not None:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            raise _fail("email", f"invalid email address {email!r}") from None

    phone = str(candidate.phone)
    if not _PHONE_RE.match(phone):
        raise _fail("phone", "must contain 10 to 15 digits")

    city = _check_enum("city", City, candidate.city)
    property_type = _check_enum("propertyType", PropertyType, candidate.property_type)
    bhk = _check_enum("bhk", BHK, candidate.bhk) if candidate.bhk else None
    purpose = _check_enum("purpose", Purpose, candidate.purpose)
    budget_min = _check_budget("budgetMin", candidate.budget_min)
    budget_max = _check_budget("budgetMax", candidate.budget_max)
    timeline = _check_enum("timeline", Timeline, candidate.timeline)
    source = _check_enum("source", Source, candidate.source)
    status = _check_enum("status", Status, candidate.status) if candidate.status else Status.NEW

    notes = candidate.notes or None
    if notes is not None and len(notes) > NOTES_MAX_LENGTH:
        raise _fail("notes", f"must be at most {NOTES_MAX_LENGTH} characters")

    tags = list(candidate.tags or [])
    if any(not isinstance(tag, str) for tag in tags):
        raise _fail("tags", "every tag must be a string")

    if property_type in UNIT_PROPERTY_TYPES and bhk is None:
        raise RecordValidationError("bhk", "bhk: BHK is required for Apartment/Villa")

    if budget_min is not None and budget_max is not None and budget_max < budget_min:
        raise RecordValidationError("budgetMax", "budgetMax: BudgetMax must be >= BudgetMin")

    return BuyerRecord(
        full_name=full_name,
        phone=phone,
        city=city,
        property_type=property_type,
        purpose=purpose,
        timeline=timeline,
        source=source,
        status=status,
        email=email,
        bhk=bhk,
        budget_min=budget_min,
        budget_max=budget_max,
        notes=notes,
        tags=tags,
    )


def row_to_candidate(values: Sequence[str]) -> BuyerCandidate:
    """Map positional CSV fields (``IMPORT_COLUMNS`` order) onto a candidate.

    The tag column is split into a trimmed, non-empty label list.
    """
    data = dict(zip(IMPORT_COLUMNS, values, strict=False))
    tags = parse_tags(data.pop("tags", None))
    return BuyerCandidate.from_mapping({**data, "tags": tags})


def scan_rows(rows: Iterable[tuple[int, Sequence[str]]]) -> RowScan:
    """Validate every decoded data row without stopping at failures.

    Args:
        rows: ``(row_number, field_values)`` pairs for non-empty data rows.

    Returns:
        A :class:`RowScan` with valid records and per-row failures, each
        tagged with its row number.
    """
    scan = RowScan()
    for row_number, values in rows:
        scan.total_rows += 1
        if len(values) != EXPECTED_COLUMN_COUNT:
            scan.failures.append(
                RowFailure(row_number, f"Expected {EXPECTED_COLUMN_COUNT} columns, got {len(values)}"),
            )
            continue
        try:
            record = validate_record(row_to_candidate(values))
        except RecordValidationError as exc:
            scan.failures.append(RowFailure(row_number, exc.message))
            continue
        scan.valid.append((row_number, record))
    return scan
