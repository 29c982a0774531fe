"""CSV export rendering for buyer records."""

import csv
import io
from collections.abc import Iterable, Mapping
from typing import Any

from buyer_api.lib.importer.parser import IMPORT_COLUMNS, join_tags

# Export header: the import columns, status last
EXPORT_COLUMNS: list[str] = [c for c in IMPORT_COLUMNS if c != "status"] + ["status"]

_NUMERIC_COLUMNS = frozenset({"budgetMin", "budgetMax"})


def _cell(column: str, value: Any) -> str:
    if value is None:
        return ""
    if column == "tags":
        return join_tags(value) if isinstance(value, list | tuple) else ""
    if column in _NUMERIC_COLUMNS:
        return str(int(value))
    return str(value)


def render_csv(records: Iterable[Mapping[str, Any]], *, columns: list[str] | None = None) -> tuple[str, int]:
    """Render buyer snapshots (keyed by wire name) as CSV text.

    Fields containing a comma, quote, or line break are quoted with inner
    quotes doubled. Tags are comma-joined; absent budgets are empty.

    Args:
        records: Buyer snapshots in output order.
        columns: Column names to include. Defaults to ``EXPORT_COLUMNS``.

    Returns:
        Tuple of (CSV text, number of records written).
    """
    cols = columns or EXPORT_COLUMNS
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(cols)

    count = 0
    for record in records:
        writer.writerow([_cell(col, record.get(col)) for col in cols])
        count += 1

    return buffer.getvalue(), count
