"""Tests for export/list filter parsing and filename derivation."""

from datetime import date

import pytest

from buyer_api.lib.exporter.filters import BuyerFilters, export_filename, parse_filters
from buyer_api.models.enums import City, PropertyType, Status, Timeline


class TestParseFilters:
    """Tests for parse_filters."""

    def test_blank_values_absent(self) -> None:
        filters = parse_filters(search="  ", city="", property_type=None)
        assert filters == BuyerFilters()

    def test_valid_values(self) -> None:
        filters = parse_filters(
            search=" asha ",
            city="Mohali",
            property_type="Villa",
            status="Visited",
            timeline="EXPLORING",
        )
        assert filters.search == "asha"
        assert filters.city is City.MOHALI
        assert filters.property_type is PropertyType.VILLA
        assert filters.status is Status.VISITED
        assert filters.timeline is Timeline.EXPLORING

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"city": "Delhi"}, "Invalid city value: 'Delhi'"),
            ({"property_type": "Castle"}, "Invalid property type value: 'Castle'"),
            ({"status": "new"}, "Invalid status value: 'new'"),
            ({"timeline": "SOON"}, "Invalid timeline value: 'SOON'"),
        ],
    )
    def test_invalid_value_rejected(self, kwargs: dict, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            parse_filters(**kwargs)


class TestExportFilename:
    """Tests for export_filename."""

    def test_no_filters(self) -> None:
        assert export_filename(BuyerFilters(), date(2026, 3, 1)) == "buyers-export-2026-03-01.csv"

    def test_all_filters_in_order(self) -> None:
        filters = BuyerFilters(
            search="asha",
            city=City.MOHALI,
            property_type=PropertyType.PLOT,
            status=Status.NEW,
            timeline=Timeline.GT_6M,
        )
        assert (
            export_filename(filters, date(2026, 3, 1))
            == "buyers-export-2026-03-01-search-asha-city-Mohali-type-Plot-status-New-timeline-GT_6M.csv"
        )

    def test_search_sanitized(self) -> None:
        filters = BuyerFilters(search='a "b"/c')
        assert export_filename(filters, date(2026, 3, 1)) == "buyers-export-2026-03-01-search-a_b_c.csv"
