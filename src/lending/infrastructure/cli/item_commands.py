"""CLI commands for the item catalog."""

from __future__ import annotations

import click

from lending.application.add_item import AddItemHandler
from lending.application.list_items import ListItemsHandler
from lending.domain.exceptions import DomainException
from lending.infrastructure.bootstrap import authorizer, unit_of_work
from lending.infrastructure.cli.common import click_error


@click.command("add")
@click.option("--name", required=True, help="Item name.")
@click.option(
    "--tier", required=True, type=click.Choice(["low", "medium", "high"]),
    help="Workflow tier.",
)
@click.option("--stock", default=0, type=int, show_default=True, help="Initial stock.")
@click.option("--description", default=None, help="Free-text description.")
@click.pass_obj
def item_add(actor: str | None, name: str, tier: str, stock: int, description: str | None) -> None:
    """Add an item to the catalog."""
    handler = AddItemHandler(unit_of_work(), authorizer())
    try:
        dto = handler.handle(actor, name=name, tier=tier, stock=stock, description=description)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Item {dto.id} added: {dto.name} (tier={dto.tier}, stock={dto.stock})")


@click.command("list")
@click.pass_obj
def item_list(actor: str | None) -> None:
    """List all items."""
    try:
        items = ListItemsHandler(unit_of_work()).handle(actor)
    except DomainException as exc:
        raise click_error(exc)

    if not items:
        click.echo("No items found.")
        return

    click.echo(f"{'ID':<34} {'Name':<24} {'Tier':<8} {'Stock':>6}")
    click.echo("-" * 75)
    for dto in items:
        click.echo(f"{dto.id:<34} {dto.name:<24} {dto.tier:<8} {dto.stock:>6}")
