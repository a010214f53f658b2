"""Service ticket commands."""

from decimal import Decimal
from typing import Optional

import click

from servicedesk.cli.error_handling import fetch_or_empty, handle_domain_error
from servicedesk.cli.resolution import resolve_optional_or_exit, resolve_or_exit
from servicedesk.cli.session import require_company_id
from servicedesk.domain.client import ClientService
from servicedesk.domain.collaborator import CollaboratorService
from servicedesk.domain.entities import ServiceDraft, TicketSubmission
from servicedesk.domain.errors import DomainError
from servicedesk.domain.line_items import LineItemAccumulator
from servicedesk.domain.service_ticket import FinancialEntryPolicy, ServiceTicketService
from servicedesk.utils.amount_parser import format_amount, parse_amount
from servicedesk.utils.date_parser import parse_date


def _ticket_service(ctx, policy: str = FinancialEntryPolicy.UPSERT.value) -> ServiceTicketService:
    return ServiceTicketService(
        ctx.obj["db"], require_company_id(ctx), entry_policy=FinancialEntryPolicy(policy)
    )


def parse_item_option(text: str) -> tuple[str, Optional[int], Optional[Decimal]]:
    """Split ``NAME_OR_ID[:QTY[:PRICE]]``.

    Raises:
        ValueError: If the quantity or price cannot be parsed, or the
            quantity is below 1
    """
    parts = text.split(":")
    if len(parts) > 3 or not parts[0].strip():
        raise ValueError(f"Invalid item '{text}'. Use NAME_OR_ID[:QTY[:PRICE]]")

    quantity = None
    if len(parts) > 1 and parts[1].strip():
        try:
            quantity = int(parts[1])
        except ValueError:
            raise ValueError(f"Invalid quantity '{parts[1]}' in item '{text}'")
        if quantity < 1:
            raise ValueError(f"Quantity must be at least 1 in item '{text}'")

    price = None
    if len(parts) > 2 and parts[2].strip():
        price = parse_amount(parts[2])

    return parts[0].strip(), quantity, price


def parse_line_setting(setting: str) -> tuple[int, str]:
    """Split ``LINE:VALUE`` where LINE is a 1-based line number."""
    line, sep, value = setting.partition(":")
    if not sep or not value.strip():
        raise ValueError(f"Invalid setting '{setting}'. Use LINE:VALUE")
    try:
        return int(line), value.strip()
    except ValueError:
        raise ValueError(f"Invalid line number '{line}' in '{setting}'")


def apply_line_changes(
    ctx,
    ticket: LineItemAccumulator,
    items: tuple[str, ...],
    remove_lines: tuple[int, ...] = (),
    quantities: tuple[str, ...] = (),
    prices: tuple[str, ...] = (),
) -> None:
    """Edit the accumulated lines as requested on the command line.

    Line numbers are 1-based and refer to the lines before any removal.
    """
    try:
        for setting in quantities:
            line, value = parse_line_setting(setting)
            quantity = int(value)
            if not ticket.set_quantity(line - 1, quantity):
                click.echo(f"Ignored quantity {quantity} for line {line} (must be at least 1)", err=True)

        for setting in prices:
            line, value = parse_line_setting(setting)
            ticket.set_price(line - 1, parse_amount(value))

        for line in sorted(set(remove_lines), reverse=True):
            ticket.remove_item(line - 1)

        for text in items:
            reference, quantity, price = parse_item_option(text)
            item_id = resolve_or_exit(ctx, ticket.catalog, reference, "Inventory item")
            item = ticket.find_item(item_id)

            previous = next((l.quantity for l in ticket.lines if l.inventory_item_id == item_id), 0)
            line = ticket.add_item(item)
            index = next(i for i, candidate in enumerate(ticket.lines) if candidate is line)
            if quantity is not None:
                ticket.set_quantity(index, previous + quantity)
            if price is not None:
                ticket.set_price(index, price)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


def _echo_submission(result: TicketSubmission) -> None:
    verb = "Created" if result.created else "Updated"
    click.echo(
        f"{verb} service {result.service_id} "
        f"(total {format_amount(result.total_value)}, {len(result.service_item_ids)} line(s))"
    )
    if result.financial_entry_id is not None:
        click.echo(f"Financial entry: {result.financial_entry_id}")


def _echo_lines(ticket: LineItemAccumulator) -> None:
    for number, line in enumerate(ticket.lines, start=1):
        click.echo(
            f"  {number:2d}. {line.name:30s} {line.quantity:4d} x {format_amount(line.price):>12s}"
            f" = {format_amount(line.subtotal):>12s}"
        )
    click.echo(f"  Total: {format_amount(ticket.total())}")


@click.group()
def service_group():
    """Manage service tickets."""
    pass


@service_group.command("list")
@click.option("--search", "-s", help="Filter by client, service type or collaborator")
@click.option("--client", help="Only services of this client (name or ID)")
@click.pass_context
def list_services(ctx, search: str | None, client: str | None):
    """List services, newest first."""
    service = _ticket_service(ctx)

    if client is not None:
        clients = ClientService(ctx.obj["db"], service.company_id).list_clients()
        client_id = resolve_or_exit(ctx, clients, client, "Client", name_of=lambda c: c.full_name)
    else:
        client_id = None
    services = fetch_or_empty(lambda: service.search_services(search, client_id), "services")

    if not services:
        click.echo("No services found.")
        return

    click.echo("\nServices:")
    click.echo("-" * 100)
    for s in services:
        click.echo(
            f"ID: {s.id:3d} | {s.service_date} | {s.service_type:20s} | {s.client_name or '-':25s} | "
            f"{s.collaborator_name or '-':15s} | {format_amount(s.total_value):>12s}"
        )


@service_group.command("types")
@click.pass_context
def list_service_types(ctx):
    """List the service types (service categories)."""
    service = _ticket_service(ctx)
    types = fetch_or_empty(service.list_service_types, "service types")
    if not types:
        click.echo("No service types found. Create one with 'category create NAME --type service'.")
        return
    for name in types:
        click.echo(name)


@service_group.command("show")
@click.argument("service_id", type=int)
@click.pass_context
def show_service(ctx, service_id: int):
    """Show a service with its lines."""
    service = _ticket_service(ctx)
    try:
        detail = service.get_detail(service_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    s = detail.service
    click.echo(f"\nService {s.id}")
    click.echo(f"  Date: {s.service_date}")
    click.echo(f"  Type: {s.service_type}")
    click.echo(f"  Client: {detail.client.full_name if detail.client else '-'}")
    if detail.client and detail.client.phone:
        click.echo(f"  Phone: {detail.client.phone}")
    click.echo(f"  Collaborator: {detail.collaborator.name if detail.collaborator else '-'}")
    if s.notes:
        click.echo(f"  Notes: {s.notes}")

    click.echo("\nLines:")
    _echo_lines(LineItemAccumulator.from_service_items((), detail.items))


def ticket_header_options(command):
    """Options shared by create and update."""
    options = [
        click.option("--date", "service_date", help="Service date (YYYY-MM-DD or 'today')"),
        click.option("--type", "service_type", help="Service type (a service category name)"),
        click.option("--client", help="Client name or ID"),
        click.option("--collaborator", help="Collaborator name or ID"),
        click.option("--notes", help="Notes"),
        click.option(
            "--item",
            "items",
            multiple=True,
            help="Add an inventory item: NAME_OR_ID[:QTY[:PRICE]] (repeatable)",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _resolve_people(ctx, company_id: int, client: str | None, collaborator: str | None):
    db = ctx.obj["db"]
    client_id = resolve_optional_or_exit(
        ctx, ClientService(db, company_id).list_clients(), client, "Client", name_of=lambda c: c.full_name
    )
    collaborator_id = resolve_optional_or_exit(
        ctx, CollaboratorService(db, company_id).list_collaborators(), collaborator, "Collaborator"
    )
    return client_id, collaborator_id


def _parse_date_or_exit(ctx, value: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


@service_group.command("create")
@ticket_header_options
@click.pass_context
def create_service(
    ctx,
    service_date: str | None,
    service_type: str | None,
    client: str | None,
    collaborator: str | None,
    notes: str | None,
    items: tuple[str, ...],
):
    """Create a service ticket.

    A financial entry for the total is recorded when the ticket has a client.

    Examples:
        servicedesk service create --type Maintenance --client "Ana Silva" \\
            --item "Gas R410A:2" --item "Filter:1:15.00"
    """
    service = _ticket_service(ctx)
    client_id, collaborator_id = _resolve_people(ctx, service.company_id, client, collaborator)

    try:
        ticket = service.start_ticket()
    except DomainError as e:
        handle_domain_error(ctx, e)
    apply_line_changes(ctx, ticket, items)

    header = ServiceDraft(
        service_date=_parse_date_or_exit(ctx, service_date or "today"),
        service_type=service_type or "",
        client_id=client_id,
        collaborator_id=collaborator_id,
        notes=notes,
    )
    try:
        result = service.submit(header, ticket)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_submission(result)


@service_group.command("update")
@click.argument("service_id", type=int)
@ticket_header_options
@click.option("--remove-item", "remove_lines", type=int, multiple=True, help="Remove line number N (repeatable)")
@click.option("--quantity", "quantities", multiple=True, help="Set quantity: LINE:QTY (repeatable)")
@click.option("--price", "prices", multiple=True, help="Set price: LINE:PRICE (repeatable)")
@click.option(
    "--entry-policy",
    type=click.Choice([p.value for p in FinancialEntryPolicy]),
    default=FinancialEntryPolicy.UPSERT.value,
    show_default=True,
    help="Update the ticket's financial entry or append a new one",
)
@click.pass_context
def update_service(
    ctx,
    service_id: int,
    service_date: str | None,
    service_type: str | None,
    client: str | None,
    collaborator: str | None,
    notes: str | None,
    items: tuple[str, ...],
    remove_lines: tuple[int, ...],
    quantities: tuple[str, ...],
    prices: tuple[str, ...],
    entry_policy: str,
):
    """Update a service ticket.

    Only the given options change. Pass an empty string to --client,
    --collaborator or --notes to clear it. Line numbers are those shown by
    'service show'.
    """
    service = _ticket_service(ctx, entry_policy)
    current = service.get_service(service_id)
    if current is None:
        click.echo(f"Error: Service {service_id} not found", err=True)
        ctx.exit(1)

    client_id, collaborator_id = _resolve_people(ctx, service.company_id, client, collaborator)
    if client is None:
        client_id = current.client_id
    if collaborator is None:
        collaborator_id = current.collaborator_id

    try:
        ticket = service.start_ticket(service_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    apply_line_changes(ctx, ticket, items, remove_lines, quantities, prices)

    header = ServiceDraft(
        service_date=_parse_date_or_exit(ctx, service_date) if service_date else current.service_date,
        service_type=service_type if service_type is not None else current.service_type,
        client_id=client_id,
        collaborator_id=collaborator_id,
        notes=notes if notes is not None else current.notes,
    )
    try:
        result = service.submit(header, ticket, existing_service_id=service_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_submission(result)


@service_group.command("delete")
@click.argument("service_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_service(ctx, service_id: int, yes: bool):
    """Delete a service ticket and its lines."""
    service = _ticket_service(ctx)
    current = service.get_service(service_id)
    if current is None:
        click.echo(f"Error: Service {service_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete service {service_id} ({current.service_type}, {current.service_date})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_service(service_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted service {service_id}")


def register_commands(cli):
    """Register service commands with main CLI."""
    cli.add_command(service_group, name="service")
