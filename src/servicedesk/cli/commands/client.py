"""Client management commands."""

import click

from servicedesk.cli.error_handling import fetch_or_empty, handle_domain_error
from servicedesk.cli.resolution import resolve_or_exit
from servicedesk.cli.session import require_company_id
from servicedesk.domain.client import ClientService
from servicedesk.domain.entities import ClientDraft
from servicedesk.domain.errors import DomainError
from servicedesk.domain.messages import MessageService
from servicedesk.utils.amount_parser import format_amount


def _client_service(ctx) -> ClientService:
    return ClientService(ctx.obj["db"], require_company_id(ctx))


def _resolve_client(ctx, service: ClientService, client: str) -> int:
    return resolve_or_exit(ctx, service.list_clients(), client, "Client", name_of=lambda c: c.full_name)


def _merge(current, new):
    """Keep the current value unless an option was given; "" clears it."""
    if new is None:
        return current
    return new or None


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("list")
@click.option("--search", "-s", help="Filter by name or phone")
@click.pass_context
def list_clients(ctx, search: str | None):
    """List clients."""
    service = _client_service(ctx)

    clients = fetch_or_empty(lambda: service.search_clients(search), "clients")
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 70)
    for client in clients:
        click.echo(
            f"ID: {client.id:3d} | {client.full_name:30s} | {client.phone or '-':15s} | {client.city or '-'}"
        )


@client_group.command("show")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def show_client(ctx, client: str):
    """Show a client with its services and messages.

    CLIENT can be a client name or ID.
    """
    service = _client_service(ctx)
    client_id = _resolve_client(ctx, service, client)

    try:
        detail = service.get_detail(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    c = detail.client
    click.echo(f"\n{c.full_name} (ID: {c.id})")
    if c.formal_name:
        click.echo(f"  Formal name: {c.formal_name}")
    click.echo(f"  Phone: {c.phone or '-'}")
    address = ", ".join(part for part in (c.address, c.district, c.city) if part)
    click.echo(f"  Address: {address or '-'}")
    click.echo(f"  Maintenance reminders: {'yes' if c.send_maintenance_reminders else 'no'}")
    click.echo(f"  Welcome message: {'yes' if c.send_welcome_message else 'no'}")
    if c.notes:
        click.echo(f"  Notes: {c.notes}")

    click.echo(f"\nServices ({len(detail.services)}):")
    for s in detail.services:
        click.echo(f"  {s.service_date} | ID: {s.id:3d} | {s.service_type:20s} | {format_amount(s.total_value)}")

    click.echo(f"\nSent messages ({len(detail.sent_messages)}):")
    for m in detail.sent_messages:
        click.echo(f"  {m.sent_at:%Y-%m-%d %H:%M} | {m.message_type:12s} | {m.status:8s} | {m.content}")


@client_group.command("messages")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def client_messages(ctx, client: str):
    """List messages sent to and scheduled for a client."""
    service = _client_service(ctx)
    client_id = _resolve_client(ctx, service, client)
    messages = MessageService(ctx.obj["db"], service.company_id)

    scheduled = fetch_or_empty(lambda: messages.list_scheduled(client_id), "scheduled messages")
    sent = fetch_or_empty(lambda: messages.list_sent(client_id), "sent messages")

    click.echo(f"\nScheduled ({len(scheduled)}):")
    for m in scheduled:
        click.echo(f"  {m.scheduled_date} | {m.message_type:12s} | {m.status:8s} | {m.content}")
    click.echo(f"\nSent ({len(sent)}):")
    for m in sent:
        click.echo(f"  {m.sent_at:%Y-%m-%d %H:%M} | {m.message_type:12s} | {m.status:8s} | {m.content}")


def client_options(command):
    """Options shared by create and update."""
    options = [
        click.option("--formal-name", help="Formal or company name"),
        click.option("--phone", help="Phone number"),
        click.option("--address", help="Street address"),
        click.option("--district", help="District"),
        click.option("--city", help="City"),
        click.option("--notes", help="Notes"),
        click.option(
            "--maintenance-reminders/--no-maintenance-reminders",
            default=None,
            help="Send maintenance reminders",
        ),
        click.option(
            "--welcome-message/--no-welcome-message", default=None, help="Send a welcome message"
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


@client_group.command("create")
@click.argument("full_name")
@client_options
@click.pass_context
def create_client(ctx, full_name: str, **fields):
    """Create a new client.

    Examples:
        servicedesk client create "Ana Silva" --phone "11 99999-0000" --city "São Paulo"
    """
    service = _client_service(ctx)
    draft = ClientDraft(
        full_name=full_name,
        formal_name=fields["formal_name"],
        phone=fields["phone"],
        address=fields["address"],
        district=fields["district"],
        city=fields["city"],
        notes=fields["notes"],
        send_maintenance_reminders=bool(fields["maintenance_reminders"]),
        send_welcome_message=bool(fields["welcome_message"]),
    )
    try:
        client_id = service.create_client(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created client '{full_name.strip()}' (ID: {client_id})")


@client_group.command("update")
@click.argument("client", metavar="CLIENT")
@click.option("--full-name", help="New full name")
@client_options
@click.pass_context
def update_client(ctx, client: str, full_name: str | None, **fields):
    """Update a client.

    CLIENT can be a client name or ID. Only the given options change; pass
    an empty string to clear a text field.
    """
    service = _client_service(ctx)
    client_id = _resolve_client(ctx, service, client)
    current = service.get_client(client_id)

    draft = ClientDraft(
        full_name=full_name if full_name is not None else current.full_name,
        formal_name=_merge(current.formal_name, fields["formal_name"]),
        phone=_merge(current.phone, fields["phone"]),
        address=_merge(current.address, fields["address"]),
        district=_merge(current.district, fields["district"]),
        city=_merge(current.city, fields["city"]),
        notes=_merge(current.notes, fields["notes"]),
        send_maintenance_reminders=(
            current.send_maintenance_reminders
            if fields["maintenance_reminders"] is None
            else fields["maintenance_reminders"]
        ),
        send_welcome_message=(
            current.send_welcome_message
            if fields["welcome_message"] is None
            else fields["welcome_message"]
        ),
    )
    try:
        service.update_client(client_id, draft)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated client {client_id}")


@client_group.command("delete")
@click.argument("client", metavar="CLIENT")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, client: str, yes: bool):
    """Delete a client.

    Their services and financial entries are kept without a client; their
    messages are deleted.
    """
    service = _client_service(ctx)
    client_id = _resolve_client(ctx, service, client)
    current = service.get_client(client_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete client '{current.full_name}' (ID: {client_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_client(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted client '{current.full_name}'")


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
