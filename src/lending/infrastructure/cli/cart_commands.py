"""CLI commands for the cart and checkout."""

from __future__ import annotations

import click

from lending.application.add_to_cart import AddToCartHandler
from lending.application.checkout_cart import CheckoutCartHandler
from lending.application.remove_from_cart import ClearCartHandler, RemoveFromCartHandler
from lending.application.show_cart import ShowCartHandler
from lending.application.update_cart_item import UpdateCartItemHandler
from lending.domain.exceptions import DomainException
from lending.infrastructure.bootstrap import authorizer, unit_of_work
from lending.infrastructure.cli.common import CONDITIONS, DATETIME, click_error, utc


@click.command("add")
@click.option("--group", "group_id", required=True, help="Group ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--quantity", default=1, type=int, show_default=True)
@click.pass_obj
def cart_add(actor: str | None, group_id: str, item_id: str, quantity: int) -> None:
    """Add an item to your cart (re-adding increments the quantity)."""
    handler = AddToCartHandler(unit_of_work(), authorizer())
    try:
        line = handler.handle(actor, group_id, item_id, quantity)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"{line.item_name}: {line.quantity} in cart")


@click.command("update")
@click.option("--group", "group_id", required=True, help="Group ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--quantity", required=True, type=int)
@click.pass_obj
def cart_update(actor: str | None, group_id: str, item_id: str, quantity: int) -> None:
    """Set the quantity of a cart line."""
    handler = UpdateCartItemHandler(unit_of_work(), authorizer())
    try:
        line = handler.handle(actor, group_id, item_id, quantity)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"{line.item_name}: {line.quantity} in cart")


@click.command("remove")
@click.option("--group", "group_id", required=True, help="Group ID.")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.pass_obj
def cart_remove(actor: str | None, group_id: str, item_id: str) -> None:
    """Remove one item from your cart."""
    try:
        RemoveFromCartHandler(unit_of_work(), authorizer()).handle(actor, group_id, item_id)
    except DomainException as exc:
        raise click_error(exc)

    click.echo("Removed.")


@click.command("clear")
@click.option("--group", "group_id", required=True, help="Group ID.")
@click.pass_obj
def cart_clear(actor: str | None, group_id: str) -> None:
    """Empty your cart."""
    try:
        ClearCartHandler(unit_of_work(), authorizer()).handle(actor, group_id)
    except DomainException as exc:
        raise click_error(exc)

    click.echo("Cart cleared.")


@click.command("show")
@click.option("--group", "group_id", required=True, help="Group ID.")
@click.pass_obj
def cart_show(actor: str | None, group_id: str) -> None:
    """Show your cart."""
    try:
        lines = ShowCartHandler(unit_of_work(), authorizer()).handle(actor, group_id)
    except DomainException as exc:
        raise click_error(exc)

    if not lines:
        click.echo("Cart is empty.")
        return

    click.echo(f"{'Item':<24} {'Tier':<8} {'Qty':>5} {'Stock':>6}")
    click.echo("-" * 46)
    for line in lines:
        click.echo(f"{line.item_name:<24} {line.item_tier:<8} {line.quantity:>5} {line.stock:>6}")


@click.command("checkout")
@click.option("--group", "group_id", required=True, help="Group ID.")
@click.option("--due", "due_date", type=DATETIME, default=None, help="Due date for medium items.")
@click.option(
    "--condition", "before_condition", type=click.Choice(CONDITIONS), default=None,
    help="Condition of medium items when taken.",
)
@click.option("--condition-url", "before_condition_url", default=None, help="Evidence URL.")
@click.pass_obj
def checkout(actor, group_id, due_date, before_condition, before_condition_url) -> None:
    """Check out your cart.

    Low items are taken, medium items are borrowed (needs --due and
    --condition), high items become approval requests.
    """
    handler = CheckoutCartHandler(unit_of_work(), authorizer())
    try:
        result = handler.handle(
            actor,
            group_id,
            due_date=utc(due_date),
            before_condition=before_condition,
            before_condition_url=before_condition_url,
        )
    except DomainException as exc:
        raise click_error(exc)

    for line in result.low_items_processed:
        click.echo(f"  taken     {line.item_name} x{line.quantity}")
    for line in result.medium_items_borrowed:
        click.echo(f"  borrowed  {line.item_name} x{line.quantity} ({line.borrowing_id})")
    for line in result.high_items_requested:
        click.echo(f"  requested {line.item_name} x{line.quantity} ({line.request_id})")
    for err in result.errors:
        click.echo(f"  FAILED    {err.item_name or err.item_id}: {err.code}: {err.message}")
