"""Importer library public API.

Provides buyer CSV decoding, record validation, and change detection.
"""

from buyer_api.lib.importer.differ import TRACKED_FIELDS, detect_field_changes, detect_status_change
from buyer_api.lib.importer.parser import (
    EXPECTED_COLUMN_COUNT,
    IMPORT_COLUMNS,
    check_header,
    iter_records,
    join_tags,
    parse_csv_line,
    parse_header,
    parse_tags,
)
from buyer_api.lib.importer.validator import (
    REQUIRED_FIELDS,
    BuyerCandidate,
    BuyerRecord,
    RowFailure,
    RowScan,
    row_to_candidate,
    scan_rows,
    validate_record,
)

__all__ = [
    "EXPECTED_COLUMN_COUNT",
    "IMPORT_COLUMNS",
    "REQUIRED_FIELDS",
    "TRACKED_FIELDS",
    "BuyerCandidate",
    "BuyerRecord",
    "RowFailure",
    "RowScan",
    "check_header",
    "detect_field_changes",
    "detect_status_change",
    "iter_records",
    "join_tags",
    "parse_csv_line",
    "parse_header",
    "parse_tags",
    "row_to_candidate",
    "scan_rows",
    "validate_record",
]
