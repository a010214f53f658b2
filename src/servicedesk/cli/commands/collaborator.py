"""Collaborator management commands."""

import click

from servicedesk.cli.error_handling import fetch_or_empty, handle_domain_error
from servicedesk.cli.resolution import resolve_or_exit
from servicedesk.cli.session import require_company_id
from servicedesk.domain.collaborator import CollaboratorService
from servicedesk.domain.entities import CollaboratorDraft
from servicedesk.domain.errors import DomainError


def _collaborator_service(ctx) -> CollaboratorService:
    return CollaboratorService(ctx.obj["db"], require_company_id(ctx))


@click.group()
def collaborator_group():
    """Manage collaborators (technicians)."""
    pass


@collaborator_group.command("list")
@click.option("--search", "-s", help="Filter by name")
@click.pass_context
def list_collaborators(ctx, search: str | None):
    """List collaborators."""
    service = _collaborator_service(ctx)

    collaborators = fetch_or_empty(lambda: service.search_collaborators(search), "collaborators")
    if not collaborators:
        click.echo("No collaborators found.")
        return

    click.echo("\nCollaborators:")
    click.echo("-" * 40)
    for c in collaborators:
        click.echo(f"ID: {c.id:3d} | {c.name}")


@collaborator_group.command("show")
@click.argument("collaborator", metavar="COLLABORATOR")
@click.pass_context
def show_collaborator(ctx, collaborator: str):
    """Show a collaborator."""
    service = _collaborator_service(ctx)
    collaborator_id = resolve_or_exit(ctx, service.list_collaborators(), collaborator, "Collaborator")
    c = service.get_collaborator(collaborator_id)
    click.echo(f"{c.name} (ID: {c.id})")
    click.echo(f"  Created: {c.created_at:%Y-%m-%d}")


@collaborator_group.command("create")
@click.argument("name")
@click.pass_context
def create_collaborator(ctx, name: str):
    """Create a new collaborator."""
    service = _collaborator_service(ctx)
    try:
        collaborator_id = service.create_collaborator(CollaboratorDraft(name=name))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created collaborator '{name.strip()}' (ID: {collaborator_id})")


@collaborator_group.command("update")
@click.argument("collaborator", metavar="COLLABORATOR")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def update_collaborator(ctx, collaborator: str, new_name: str):
    """Rename a collaborator.

    COLLABORATOR can be a collaborator name or ID.
    """
    service = _collaborator_service(ctx)
    collaborator_id = resolve_or_exit(ctx, service.list_collaborators(), collaborator, "Collaborator")
    try:
        service.update_collaborator(collaborator_id, CollaboratorDraft(name=new_name))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed collaborator to '{new_name.strip()}'")


@collaborator_group.command("delete")
@click.argument("collaborator", metavar="COLLABORATOR")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_collaborator(ctx, collaborator: str, yes: bool):
    """Delete a collaborator. Their services are kept without a performer."""
    service = _collaborator_service(ctx)
    collaborator_id = resolve_or_exit(ctx, service.list_collaborators(), collaborator, "Collaborator")
    current = service.get_collaborator(collaborator_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete collaborator '{current.name}' (ID: {collaborator_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_collaborator(collaborator_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted collaborator '{current.name}'")


def register_commands(cli):
    """Register collaborator commands with main CLI."""
    cli.add_command(collaborator_group, name="collaborator")
