"""Plain-text rendering helpers for CLI output."""

from decimal import Decimal

import click


def fmt_amount(value: Decimal) -> str:
    return f"{value:,.2f}"


def fmt_quantity(value: Decimal) -> str:
    """Quantities without trailing zeros: 10, 2.5."""
    text = f"{value:,.4f}".rstrip("0").rstrip(".")
    return text if text not in ("-0", "") else "0"



def echo_title(title: str, period_label: str, width: int = 100) -> None:
    click.echo(f"\n{title} ({period_label})")
    click.echo("-" * width)


def echo_table(headers: list[str], rows: list[list[str]], first_width: int = 36) -> None:
    """Print a fixed-width table.

    The first two columns are left-aligned text; the rest are right-aligned
    numbers sized to their widest cell.
    """
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    if len(widths) > 1:
        widths[1] = min(widths[1], first_width)

    def render(cells):
        parts = []
        for i, cell in enumerate(cells):
            if i < 2:
                parts.append(f"{cell[: widths[i]]:<{widths[i]}}")
            else:
                parts.append(f"{cell:>{widths[i]}}")
        return " | ".join(parts)

    click.echo(render(headers))
    click.echo("-" * len(render(headers)))
    for row in rows:
        click.echo(render(row))
