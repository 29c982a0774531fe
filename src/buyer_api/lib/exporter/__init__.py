"""Exporter library — filter parsing, CSV rendering, and budget display."""

from buyer_api.lib.exporter.budget import BudgetCheck, format_budget, validate_budget
from buyer_api.lib.exporter.csv_writer import EXPORT_COLUMNS, render_csv
from buyer_api.lib.exporter.filters import SEARCH_FIELDS, BuyerFilters, export_filename, parse_filters

__all__ = [
    "EXPORT_COLUMNS",
    "SEARCH_FIELDS",
    "BudgetCheck",
    "BuyerFilters",
    "export_filename",
    "format_budget",
    "parse_filters",
    "render_csv",
    "validate_budget",
]
