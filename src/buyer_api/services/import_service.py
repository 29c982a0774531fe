"""Import service — all-or-nothing CSV import of buyer leads.

The pipeline runs intake checks, validates the header, scans every data row,
and commits only when no row failed. Valid rows and their IMPORTED history
entries are written in a single transaction.
"""

import uuid
from pathlib import PurePath

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.core.errors import ImportRejectedError, PersistenceError
from buyer_api.lib.importer import RowScan, check_header, iter_records, parse_csv_line, parse_header, scan_rows
from buyer_api.models.buyer import Buyer
from buyer_api.schemas.imports import ImportResult, RowError
from buyer_api.services.history_service import imported_entry

_CSV_EXTENSION = ".csv"
_CSV_MEDIA_TYPE = "text/csv"


def decode_content(content: bytes) -> str:
    """Decode uploaded bytes as UTF-8 (BOM tolerated), falling back to Latin-1."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("Upload is not valid UTF-8; decoding as latin-1")
        return content.decode("latin-1")


def _check_intake(
    filename: str | None,
    content: bytes | None,
    content_type: str | None,
    max_bytes: int,
) -> str:
    if not filename or content is None:
        raise ImportRejectedError("No file provided")

    if len(content) > max_bytes:
        raise ImportRejectedError(
            f"File exceeds maximum size of {max_bytes // (1024 * 1024)} MB",
            status_code=413,
        )

    suffix = PurePath(filename).suffix.lower()
    media_type = (content_type or "").split(";")[0].strip().lower()
    if suffix != _CSV_EXTENSION and media_type != _CSV_MEDIA_TYPE:
        raise ImportRejectedError("File must be a CSV file")

    text = decode_content(content)
    if not text.strip():
        raise ImportRejectedError("CSV file is empty")
    return text


def read_import_rows(text: str, max_rows: int) -> tuple[list[str], list[tuple[int, list[str]]]]:
    """Split decoded CSV text into a header and numbered data rows.

    Blank records are skipped. The header is row 1, so the first data row is
    row 2. A header with no data rows yields an empty row list.

    Raises:
        ImportRejectedError: If there is no header, more than ``max_rows``
            data rows, or the header lacks a required column.
    """
    records = [record for record in iter_records(text) if record.strip()]
    if not records:
        raise ImportRejectedError("CSV file is empty")

    data_records = records[1:]
    if len(data_records) > max_rows:
        raise ImportRejectedError(f"Maximum {max_rows} rows allowed, got {len(data_records)}")

    header = parse_header(records[0])
    check_header(header)

    rows = [(index, parse_csv_line(record)) for index, record in enumerate(data_records, start=2)]
    return header, rows


async def _commit_rows(session: AsyncSession, scan: RowScan, owner_id: str) -> int:
    try:
        for _row, record in scan.valid:
            buyer = Buyer(id=uuid.uuid4(), owner_id=owner_id, **record.to_columns())
            session.add(buyer)
            session.add(imported_entry(buyer.id, owner_id, record.to_snapshot()))
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception(f"Import commit failed; rolled back {len(scan.valid)} rows")
        raise PersistenceError(str(exc)) from exc
    return len(scan.valid)


async def import_buyers_csv(
    session: AsyncSession,
    *,
    filename: str | None,
    content: bytes | None,
    owner_id: str,
    max_bytes: int,
    max_rows: int,
    content_type: str | None = None,
) -> ImportResult:
    """Run the buyer import pipeline over one uploaded file.

    Args:
        session: Database session.
        filename: Name of the uploaded file.
        content: Raw file bytes.
        owner_id: Owner assigned to every imported buyer, also ``changed_by``.
        max_bytes: Upload size cap.
        max_rows: Data row cap (header excluded).
        content_type: Declared media type of the upload, if known.

    Returns:
        The import report. ``success`` is False when any row failed, in
        which case nothing was written.

    Raises:
        ImportRejectedError: For file-level failures (missing, too large,
            not CSV, empty, too many rows, missing headers).
        PersistenceError: If the commit failed and was rolled back.
    """
    try:
        text = _check_intake(filename, content, content_type, max_bytes)
        _header, rows = read_import_rows(text, max_rows)
    except ImportRejectedError as exc:
        logger.warning(f"Import of {filename!r} rejected: {exc.message}")
        raise

    scan = scan_rows(rows)
    errors = [RowError(row=failure.row, message=failure.message) for failure in scan.failures]

    if errors:
        logger.info(f"Import of {filename!r} vetoed: {len(errors)} of {scan.total_rows} rows invalid")
        return ImportResult(
            success=False,
            total_rows=scan.total_rows,
            valid_rows=len(scan.valid),
            errors=errors,
            inserted_count=0,
        )

    inserted = await _commit_rows(session, scan, owner_id)
    logger.info(f"Imported {inserted} buyers from {filename!r}")
    return ImportResult(
        success=True,
        total_rows=scan.total_rows,
        valid_rows=len(scan.valid),
        errors=[],
        inserted_count=inserted,
    )
