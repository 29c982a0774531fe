"""Buyer CSV decoding: record splitting, quote-aware field parsing, header checks.

Grammar: comma-separated fields, double-quote delimited values, ``""`` inside
a quoted value is a literal quote, records end at a newline outside quotes.
A quote that does not start a field is ordinary text.
Unquoted values are whitespace-trimmed; quoted values are kept verbatim.
"""

from collections.abc import Iterator, Sequence

from buyer_api.core.errors import ImportRejectedError

# Fixed positional column order for buyer imports
IMPORT_COLUMNS: list[str] = [
    "fullName",
    "email",
    "phone",
    "city",
    "propertyType",
    "bhk",
    "purpose",
    "budgetMin",
    "budgetMax",
    "timeline",
    "source",
    "notes",
    "tags",
    "status",
]

EXPECTED_COLUMN_COUNT = len(IMPORT_COLUMNS)


def iter_records(text: str) -> Iterator[str]:
    """Split CSV text into raw record strings.

    A double quote opens a quoted value only as the first non-blank character
    of a field; anywhere else it is literal text. Newlines inside a quoted
    value belong to the value. ``\\r\\n`` and bare ``\\r`` line endings are
    treated as ``\\n``. Blank lines are yielded as empty strings so the caller
    decides whether to skip them.

    Args:
        text: Entire decoded file content.

    Yields:
        One raw record (without its terminating newline) per line/record.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    current: list[str] = []
    in_quotes = False
    field_start = True
    just_closed = False

    for char in text:
        if in_quotes:
            current.append(char)
            if char == '"':
                in_quotes = False
                just_closed = True
            continue

        if char == "\n":
            yield "".join(current)
            current = []
            field_start = True
            just_closed = False
            continue

        current.append(char)
        if char == '"' and (field_start or just_closed):
            # Field-opening quote, or the second half of a doubled quote
            in_quotes = True
            field_start = False
        elif char == ",":
            field_start = True
        elif not char.isspace():
            field_start = False
        just_closed = False

    if current:
        yield "".join(current)


def parse_csv_line(line: str, expected_columns: int | None = EXPECTED_COLUMN_COUNT) -> list[str]:
    """Decode one record into its field values.

    Args:
        line: A single raw record as produced by :func:`iter_records`.
        expected_columns: Pad the result with empty strings up to this many
            fields. ``None`` disables padding. Extra fields are never dropped.

    Returns:
        Ordered field values. An empty or whitespace-only line yields ``[]``.
    """
    if not line or not line.strip():
        return []

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    was_quoted = False
    after_quote = False
    i = 0

    while i < len(line):
        char = line[i]
        if in_quotes:
            if char == '"':
                if i + 1 < len(line) and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
                    after_quote = True
            else:
                current.append(char)
        elif char == ",":
            fields.append(_finish_field(current, was_quoted))
            current = []
            was_quoted = False
            after_quote = False
        elif char == '"' and not was_quoted and not "".join(current).strip():
            # Opening quote: whitespace before it is not part of the value
            current = []
            in_quotes = True
            was_quoted = True
        elif after_quote and char.isspace():
            pass
        else:
            current.append(char)
        i += 1

    fields.append(_finish_field(current, was_quoted))

    if expected_columns is not None:
        while len(fields) < expected_columns:
            fields.append("")

    return fields


def _finish_field(chars: list[str], was_quoted: bool) -> str:
    value = "".join(chars)
    return value if was_quoted else value.strip()


def parse_header(line: str) -> list[str]:
    """Decode a header record into trimmed column names."""
    return [name.strip() for name in parse_csv_line(line, expected_columns=None)]


def check_header(header: Sequence[str], required: Sequence[str] = IMPORT_COLUMNS) -> None:
    """Verify every required column name appears in the header (order-independent).

    Raises:
        ImportRejectedError: Naming every missing column.
    """
    present = set(header)
    missing = [name for name in required if name not in present]
    if missing:
        msg = f"Missing required headers: {', '.join(missing)}"
        raise ImportRejectedError(msg)


def parse_tags(raw: str | None) -> list[str]:
    """Split a comma-separated tag string into trimmed, non-empty labels.

    Duplicates are kept in order.
    """
    if not raw or not raw.strip():
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def join_tags(tags: Sequence[str]) -> str:
    """Render a tag list the way exports and imports exchange it."""
    return ", ".join(tags)
