"""Category management commands."""

import click

from servicedesk.cli.error_handling import fetch_or_empty, handle_domain_error
from servicedesk.cli.resolution import resolve_or_exit
from servicedesk.cli.session import require_company_id
from servicedesk.domain.category import CategoryService
from servicedesk.domain.entities import CategoryDraft, CategoryType
from servicedesk.domain.errors import DomainError

TYPE_CHOICE = click.Choice([t.value for t in CategoryType], case_sensitive=False)


def _category_service(ctx) -> CategoryService:
    return CategoryService(ctx.obj["db"], require_company_id(ctx))


@click.group()
def category_group():
    """Manage product and service categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=TYPE_CHOICE, help="Only product or service categories")
@click.option("--search", "-s", help="Filter by name")
@click.pass_context
def list_categories(ctx, category_type: str | None, search: str | None):
    """List categories."""
    service = _category_service(ctx)

    categories = fetch_or_empty(lambda: service.search_categories(search, category_type), "categories")
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 50)
    for c in categories:
        click.echo(f"ID: {c.id:3d} | {c.name:30s} | {c.category_type.value}")


@category_group.command("show")
@click.argument("category", metavar="CATEGORY")
@click.pass_context
def show_category(ctx, category: str):
    """Show a category and how many inventory items use it."""
    service = _category_service(ctx)
    category_id = resolve_or_exit(ctx, service.list_categories(), category, "Category")
    c = service.get_category(category_id)
    items = ctx.obj["db"].list_inventory_items(service.company_id, category_id=category_id)
    click.echo(f"{c.name} (ID: {c.id})")
    click.echo(f"  Type: {c.category_type.value}")
    click.echo(f"  Inventory items: {len(items)}")


@category_group.command("create")
@click.argument("name")
@click.option("--type", "category_type", type=TYPE_CHOICE, required=True, help="product or service")
@click.pass_context
def create_category(ctx, name: str, category_type: str):
    """Create a new category.

    Service categories populate the service type of tickets.

    Examples:
        servicedesk category create "Maintenance" --type service
        servicedesk category create "Gas" --type product
    """
    service = _category_service(ctx)
    try:
        category_id = service.create_category(
            CategoryDraft(name=name, category_type=CategoryType(category_type.lower()))
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {category_type.lower()} category '{name.strip()}' (ID: {category_id})")


@category_group.command("update")
@click.argument("category", metavar="CATEGORY")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def update_category(ctx, category: str, new_name: str):
    """Rename a category. The type cannot be changed."""
    service = _category_service(ctx)
    category_id = resolve_or_exit(ctx, service.list_categories(), category, "Category")
    current = service.get_category(category_id)
    try:
        service.update_category(
            category_id, CategoryDraft(name=new_name, category_type=current.category_type)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed category to '{new_name.strip()}'")


@category_group.command("delete")
@click.argument("category", metavar="CATEGORY")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, category: str, yes: bool):
    """Delete a category. Its inventory items become uncategorized."""
    service = _category_service(ctx)
    category_id = resolve_or_exit(ctx, service.list_categories(), category, "Category")
    current = service.get_category(category_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete category '{current.name}' (ID: {category_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_category(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{current.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
