"""Utility functions for microbooks."""

from microbooks.utils.date_parser import parse_date
from microbooks.utils.amount_parser import parse_amount
from microbooks.utils.line_item_parser import parse_line_item

__all__ = ["parse_date", "parse_amount", "parse_line_item"]
