"""Inventory management commands."""

import click

from servicedesk.cli.error_handling import fetch_or_empty, handle_domain_error
from servicedesk.cli.resolution import resolve_optional_or_exit, resolve_or_exit
from servicedesk.cli.session import require_company_id
from servicedesk.domain.category import CategoryService
from servicedesk.domain.entities import CategoryType, InventoryItemDraft
from servicedesk.domain.errors import DomainError
from servicedesk.domain.inventory import InventoryService
from servicedesk.utils.amount_parser import format_amount, parse_amount


def _inventory_service(ctx) -> InventoryService:
    return InventoryService(ctx.obj["db"], require_company_id(ctx))


def _product_categories(ctx, company_id: int):
    return CategoryService(ctx.obj["db"], company_id).list_categories(CategoryType.PRODUCT)


def _parse_value_or_exit(ctx, value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid value: {e}", err=True)
        ctx.exit(1)


@click.group()
def inventory_group():
    """Manage inventory items (materials and parts)."""
    pass


@inventory_group.command("list")
@click.option("--search", "-s", help="Filter by name")
@click.option("--category", help="Product category name or ID")
@click.pass_context
def list_items(ctx, search: str | None, category: str | None):
    """List inventory items."""
    service = _inventory_service(ctx)
    category_id = resolve_optional_or_exit(
        ctx, _product_categories(ctx, service.company_id), category, "Category"
    )

    items = fetch_or_empty(lambda: service.search_items(search, category_id), "inventory items")
    if not items:
        click.echo("No inventory items found.")
        return

    click.echo("\nInventory:")
    click.echo("-" * 70)
    for item in items:
        click.echo(
            f"ID: {item.id:3d} | {item.name:30s} | {format_amount(item.value):>14s} | {item.category_name or '-'}"
        )


@inventory_group.command("show")
@click.argument("item", metavar="ITEM")
@click.pass_context
def show_item(ctx, item: str):
    """Show an inventory item."""
    service = _inventory_service(ctx)
    item_id = resolve_or_exit(ctx, service.list_items(), item, "Inventory item")
    i = service.get_item(item_id)
    click.echo(f"{i.name} (ID: {i.id})")
    click.echo(f"  Value: {format_amount(i.value)}")
    click.echo(f"  Category: {i.category_name or '-'}")


@inventory_group.command("create")
@click.argument("name")
@click.option("--value", required=True, help="Unit value (e.g. 120.00 or 'R$ 120,00')")
@click.option("--category", help="Product category name or ID")
@click.pass_context
def create_item(ctx, name: str, value: str, category: str | None):
    """Create a new inventory item.

    Examples:
        servicedesk inventory create "Copper pipe 1/4" --value 35.90 --category Pipes
    """
    service = _inventory_service(ctx)
    amount = _parse_value_or_exit(ctx, value)
    category_id = resolve_optional_or_exit(
        ctx, _product_categories(ctx, service.company_id), category, "Category"
    )
    try:
        item_id = service.create_item(InventoryItemDraft(name=name, value=amount, category_id=category_id))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created inventory item '{name.strip()}' (ID: {item_id})")


@inventory_group.command("update")
@click.argument("item", metavar="ITEM")
@click.option("--name", help="New name")
@click.option("--value", help="New unit value")
@click.option("--category", help="Product category name or ID, or empty string to clear")
@click.pass_context
def update_item(ctx, item: str, name: str | None, value: str | None, category: str | None):
    """Update an inventory item.

    Stored service tickets keep the prices they were saved with.
    """
    service = _inventory_service(ctx)
    item_id = resolve_or_exit(ctx, service.list_items(), item, "Inventory item")
    current = service.get_item(item_id)

    category_id = current.category_id
    if category is not None:
        category_id = resolve_optional_or_exit(
            ctx, _product_categories(ctx, service.company_id), category, "Category"
        )

    draft = InventoryItemDraft(
        name=name if name is not None else current.name,
        value=_parse_value_or_exit(ctx, value) if value is not None else current.value,
        category_id=category_id,
    )
    try:
        service.update_item(item_id, draft)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated inventory item {item_id}")


@inventory_group.command("delete")
@click.argument("item", metavar="ITEM")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_item(ctx, item: str, yes: bool):
    """Delete an inventory item."""
    service = _inventory_service(ctx)
    item_id = resolve_or_exit(ctx, service.list_items(), item, "Inventory item")
    current = service.get_item(item_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete inventory item '{current.name}' (ID: {item_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_item(item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted inventory item '{current.name}'")


def register_commands(cli):
    """Register inventory commands with main CLI."""
    cli.add_command(inventory_group, name="inventory")
