"""Financial entry commands."""

import click

from servicedesk.cli.date_filters import collect_period_flags, period_options, resolve_cli_date_range
from servicedesk.cli.error_handling import fetch_or_empty, handle_domain_error
from servicedesk.cli.resolution import resolve_optional_or_exit
from servicedesk.cli.session import require_company_id
from servicedesk.domain.client import ClientService
from servicedesk.domain.entities import FinancialEntryDraft
from servicedesk.domain.errors import DomainError
from servicedesk.domain.financial import FinancialEntryService
from servicedesk.utils.amount_parser import format_amount, parse_amount
from servicedesk.utils.date_parser import parse_date


def _entry_service(ctx) -> FinancialEntryService:
    return FinancialEntryService(ctx.obj["db"], require_company_id(ctx))


def _resolve_client(ctx, company_id: int, client: str | None):
    clients = ClientService(ctx.obj["db"], company_id).list_clients()
    return resolve_optional_or_exit(ctx, clients, client, "Client", name_of=lambda c: c.full_name)


def _resolve_service(ctx, company_id: int, service: str | None):
    if service is None or service.strip() == "":
        return None
    try:
        service_id = int(service)
    except ValueError:
        click.echo(f"Error: Service must be an ID, got '{service}'", err=True)
        ctx.exit(1)
    if ctx.obj["db"].get_service(company_id, service_id) is None:
        click.echo(f"Error: Service {service_id} not found", err=True)
        ctx.exit(1)
    return service_id


def _parse_or_exit(ctx, parser, value: str, label: str):
    try:
        return parser(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def financial_group():
    """Manage financial entries (revenue)."""
    pass


@financial_group.command("list")
@click.option("--search", "-s", help="Filter by client name, notes or service type")
@click.option("--client", help="Only entries of this client (name or ID)")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today')")
@period_options
@click.pass_context
def list_entries(
    ctx,
    search: str | None,
    client: str | None,
    start_date: str | None,
    end_date: str | None,
    **periods: bool,
):
    """List financial entries, newest first."""
    service = _entry_service(ctx)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=collect_period_flags(**periods)
    )
    client_id = _resolve_client(ctx, service.company_id, client)

    entries = fetch_or_empty(
        lambda: service.search_entries(search, start, end, client_id=client_id), "financial entries"
    )
    if not entries:
        click.echo("No financial entries found.")
        return

    click.echo(f"\nFound {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}:")
    click.echo("-" * 100)
    for e in entries:
        click.echo(
            f"ID: {e.id:3d} | {e.entry_date} | {format_amount(e.value):>12s} | "
            f"{e.client_name or '-':25s} | {e.service_type or '-':15s} | {e.notes or ''}"
        )
    total = sum(e.value for e in entries)
    click.echo("-" * 100)
    click.echo(f"Total: {format_amount(total)}")


@financial_group.command("add")
@click.option("--date", "entry_date", default="today", show_default=True, help="Entry date")
@click.option("--value", required=True, help="Value (e.g. 250.00 or 'R$ 250,00')")
@click.option("--client", help="Client name or ID")
@click.option("--service", help="Service ID")
@click.option("--notes", help="Notes")
@click.pass_context
def add_entry(ctx, entry_date: str, value: str, client: str | None, service: str | None, notes: str | None):
    """Record a financial entry."""
    entries = _entry_service(ctx)
    draft = FinancialEntryDraft(
        entry_date=_parse_or_exit(ctx, parse_date, entry_date, "date"),
        value=_parse_or_exit(ctx, parse_amount, value, "value"),
        client_id=_resolve_client(ctx, entries.company_id, client),
        service_id=_resolve_service(ctx, entries.company_id, service),
        notes=notes,
    )
    try:
        entry_id = entries.create_entry(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created financial entry {entry_id} ({format_amount(draft.value)})")


@financial_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--date", "entry_date", help="Entry date")
@click.option("--value", help="Value")
@click.option("--client", help="Client name or ID, or empty string to clear")
@click.option("--service", help="Service ID, or empty string to clear")
@click.option("--notes", help="Notes")
@click.pass_context
def update_entry(
    ctx,
    entry_id: int,
    entry_date: str | None,
    value: str | None,
    client: str | None,
    service: str | None,
    notes: str | None,
):
    """Update a financial entry. Only the given options change."""
    entries = _entry_service(ctx)
    current = entries.get_entry(entry_id)
    if current is None:
        click.echo(f"Error: Financial entry {entry_id} not found", err=True)
        ctx.exit(1)

    draft = FinancialEntryDraft(
        entry_date=_parse_or_exit(ctx, parse_date, entry_date, "date") if entry_date else current.entry_date,
        value=_parse_or_exit(ctx, parse_amount, value, "value") if value else current.value,
        client_id=_resolve_client(ctx, entries.company_id, client) if client is not None else current.client_id,
        service_id=(
            _resolve_service(ctx, entries.company_id, service) if service is not None else current.service_id
        ),
        notes=notes if notes is not None else current.notes,
    )
    try:
        entries.update_entry(entry_id, draft)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated financial entry {entry_id}")


@financial_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool):
    """Delete a financial entry."""
    entries = _entry_service(ctx)
    current = entries.get_entry(entry_id)
    if current is None:
        click.echo(f"Error: Financial entry {entry_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete financial entry {entry_id} "
        f"({current.entry_date}, {format_amount(current.value)})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        entries.delete_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted financial entry {entry_id}")


def register_commands(cli):
    """Register financial commands with main CLI."""
    cli.add_command(financial_group, name="financial")
