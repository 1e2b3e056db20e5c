"""Customer and supplier commands."""

import click
from microbooks.cli.error_handling import handle_domain_error
from microbooks.domain.entities import PartyRole
from microbooks.domain.party import PartyService


def make_party_group(role: PartyRole) -> click.Group:
    """Build the add/list command group for customers or suppliers."""
    noun = role.value

    @click.group(noun, help=f"Manage {noun}s.")
    def group():
        pass

    @group.command("add", help=f"Add a {noun}.")
    @click.argument("name", metavar="NAME")
    @click.option("--classification", help="Free-form grouping (e.g., 'wholesale')")
    @click.option("--phone", help="Phone number")
    @click.option("--address", help="Address")
    @click.option("--tax-id", help="Tax identification number")
    @click.option("--bank", "bank_name", help="Bank name")
    @click.option("--account-number", "bank_account_number", help="Bank account number")
    @click.pass_context
    def add(ctx, name: str, **details):
        service = PartyService(ctx.obj["db"])
        try:
            party_id = service.create_party(role, name, **details)
            click.echo(f"Created {noun} '{name.strip()}' (ID: {party_id})")
        except ValueError as e:
            handle_domain_error(ctx, e)

    @group.command("list", help=f"List all {noun}s.")
    @click.pass_context
    def list_parties(ctx):
        service = PartyService(ctx.obj["db"])
        parties = (
            service.list_customers() if role == PartyRole.CUSTOMER else service.list_suppliers()
        )
        if not parties:
            click.echo(f"No {noun}s found.")
            return

        click.echo(f"\n{noun.capitalize()}s:")
        click.echo("-" * 80)
        for p in parties:
            details = " | ".join(
                value for value in (p.classification, p.phone, p.tax_id) if value
            )
            line = f"ID: {p.id:3d} | {p.name:24s}"
            click.echo(f"{line} | {details}" if details else line)

    return group


def register_commands(cli):
    """Register customer and supplier commands with main CLI."""
    cli.add_command(make_party_group(PartyRole.CUSTOMER))
    cli.add_command(make_party_group(PartyRole.SUPPLIER))
