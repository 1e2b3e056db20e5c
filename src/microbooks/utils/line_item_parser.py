"""Parsing of product lines given on the command line."""

from decimal import Decimal
from typing import NamedTuple, Optional

from microbooks.utils.amount_parser import parse_amount


class ParsedLineItem(NamedTuple):
    """Parsed line; ``unit_price`` is None when it was left out."""

    product_id: int
    quantity: Decimal
    unit_price: Optional[Decimal]


def parse_line_item(text: str) -> ParsedLineItem:
    """Parse "PRODUCT_ID:QUANTITY[:UNIT_PRICE]".

    Examples: "3:10:25000", "3:2.5", "3:10:25,000"

    Raises:
        ValueError: If the line is malformed
    """
    parts = [part.strip() for part in text.split(":")]
    if len(parts) not in (2, 3) or not all(parts):
        raise ValueError(
            f"Invalid line item '{text}': expected PRODUCT_ID:QUANTITY[:UNIT_PRICE]"
        )

    try:
        product_id = int(parts[0])
    except ValueError:
        raise ValueError(f"Invalid product ID in line item '{text}'") from None

    quantity = parse_amount(parts[1])
    unit_price = parse_amount(parts[2]) if len(parts) == 3 else None
    return ParsedLineItem(product_id, quantity, unit_price)
