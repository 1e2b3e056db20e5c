"""CLI helpers for reporting period resolution."""

import functools
from datetime import date

import click

from microbooks.cli.error_handling import handle_domain_error
from microbooks.domain.errors import InvalidPeriodError
from microbooks.domain.periods import ReportingPeriod
from microbooks.utils.date_parser import NAMED_PERIODS, get_date_range, parse_date


def period_options(command):
    """Attach the shared period options to a command.

    The decorated function is called as ``command(ctx, period=..., **options)``
    with the resolved ReportingPeriod. Put any other click options above
    this decorator.
    """

    @click.option("--year", type=int, help="Calendar year (defaults to the current year)")
    @click.option("--quarter", type=click.IntRange(1, 4), help="Quarter of --year")
    @click.option("--month", type=click.IntRange(1, 12), help="Month of --year")
    @click.option(
        "--period",
        "named_period",
        type=click.Choice(NAMED_PERIODS),
        help="Named period relative to today",
    )
    @click.option("--start-date", help="Start date (YYYY-MM-DD, DD/MM/YYYY or 'today')")
    @click.option("--end-date", help="End date (YYYY-MM-DD, DD/MM/YYYY or 'today')")
    @click.pass_context
    @functools.wraps(command)
    def wrapper(ctx, year, quarter, month, named_period, start_date, end_date, **kwargs):
        period = resolve_cli_period(
            ctx,
            year=year,
            quarter=quarter,
            month=month,
            named_period=named_period,
            start_date=start_date,
            end_date=end_date,
        )
        return command(ctx, period=period, **kwargs)

    return wrapper


def resolve_cli_period(
    ctx,
    *,
    year: int | None = None,
    quarter: int | None = None,
    month: int | None = None,
    named_period: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    today: date | None = None,
) -> ReportingPeriod:
    """Resolve a reporting period from CLI options.

    Precedence: explicit dates, then a named period, then year with an
    optional quarter or month. With nothing given, the current year.
    """
    today = today or date.today()
    calendar_given = year is not None or quarter is not None or month is not None

    if quarter is not None and month is not None:
        click.echo("Error: --quarter and --month cannot be combined.", err=True)
        ctx.exit(1)

    if (start_date or end_date) and (calendar_given or named_period):
        click.echo(
            "Error: --start-date/--end-date cannot be combined with --year, --quarter, --month or --period.",
            err=True,
        )
        ctx.exit(1)

    if named_period and calendar_given:
        click.echo("Error: --period cannot be combined with --year, --quarter or --month.", err=True)
        ctx.exit(1)

    try:
        if start_date or end_date:
            if not (start_date and end_date):
                click.echo("Error: --start-date and --end-date must be given together.", err=True)
                ctx.exit(1)
            try:
                start = parse_date(start_date)
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid date: {e}", err=True)
                ctx.exit(1)
            return ReportingPeriod(start, end)

        if named_period:
            start, end = get_date_range(named_period, today=today)
            return ReportingPeriod(start, end)

        year = year if year is not None else today.year
        if quarter is not None:
            return ReportingPeriod.for_quarter(year, quarter)
        if month is not None:
            return ReportingPeriod.for_month(year, month)
        return ReportingPeriod.for_year(year)
    except InvalidPeriodError as e:
        handle_domain_error(ctx, e)
