"""Main CLI entry point."""

import logging

import click
from microbooks.database.factories import create_sqlite_database

# Import and register all commands at module level
from microbooks.cli.commands import (
    add,
    debt,
    ledger,
    party,
    product,
    report,
    stock,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides MICROBOOKS_DB_PATH environment variable)",
    envvar="MICROBOOKS_DB_PATH",
)
@click.option(
    "--rates",
    "rates_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Tax and payroll rate table in TOML (overrides MICROBOOKS_RATES_PATH)",
    envvar="MICROBOOKS_RATES_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, rates_path: str | None, verbose: bool):
    """Microbooks - bookkeeping for household businesses.

    Record sales, purchases, payments and payroll, then print the revenue,
    expense, inventory, tax, payroll, cash and bank ledgers derived from them.
    """
    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    ctx.obj["rates_path"] = rates_path

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
product.register_commands(cli)
party.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
ledger.register_commands(cli)
stock.register_commands(cli)
debt.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
