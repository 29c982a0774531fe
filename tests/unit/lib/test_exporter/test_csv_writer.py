"""Tests for the buyer CSV export writer."""

import csv
import io

from buyer_api.lib.exporter.csv_writer import EXPORT_COLUMNS, render_csv
from buyer_api.lib.importer.parser import IMPORT_COLUMNS


def _record(**overrides: object) -> dict:
    record = dict.fromkeys(EXPORT_COLUMNS)
    record.update(
        fullName="Asha Verma",
        phone="9876543210",
        city="Chandigarh",
        propertyType="Plot",
        purpose="Buy",
        timeline="GT_6M",
        source="Website",
        status="New",
        tags=[],
    )
    record.update(overrides)
    return record


class TestRenderCsv:
    """Tests for render_csv."""

    def test_header_has_status_last(self) -> None:
        text, count = render_csv([])
        assert count == 0
        assert text.splitlines()[0].split(",") == EXPORT_COLUMNS
        assert EXPORT_COLUMNS[-1] == "status"
        assert sorted(EXPORT_COLUMNS) == sorted(IMPORT_COLUMNS)

    def test_comma_value_quoted(self) -> None:
        text, _ = render_csv([_record(notes="Acme, Inc.")])
        assert '"Acme, Inc."' in text

    def test_quote_doubled(self) -> None:
        text, _ = render_csv([_record(notes='say "hi"')])
        assert '"say ""hi"""' in text

    def test_newline_value_quoted(self) -> None:
        text, _ = render_csv([_record(notes="line one\nline two")])
        assert '"line one\nline two"' in text

    def test_tags_and_budgets(self) -> None:
        text, count = render_csv([_record(tags=["hot", "family"], budgetMin=0, budgetMax=None)])
        assert count == 1
        row = next(csv.DictReader(io.StringIO(text)))
        assert row["tags"] == "hot, family"
        assert row["budgetMin"] == "0"
        assert row["budgetMax"] == ""
        assert row["email"] == ""

    def test_custom_columns(self) -> None:
        text, _ = render_csv([_record()], columns=["fullName", "status"])
        assert text == "fullName,status\nAsha Verma,New\n"
