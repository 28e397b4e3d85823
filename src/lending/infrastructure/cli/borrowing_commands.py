"""CLI commands for borrowing and returning items."""

from __future__ import annotations

import click

from lending.application.borrow_item import BorrowItemHandler
from lending.application.check_borrowing_status import CheckBorrowingStatusHandler
from lending.application.list_borrowings import (
    BorrowingState,
    ListBorrowingsHandler,
    ListDueBorrowingsHandler,
)
from lending.application.return_item import ReturnItemHandler
from lending.domain.exceptions import DomainException
from lending.infrastructure.bootstrap import authorizer, unit_of_work
from lending.infrastructure.cli.common import CONDITIONS, DATETIME, click_error, fmt, utc


def _display(rows) -> None:
    if not rows:
        click.echo("No borrowings found.")
        return
    click.echo(f"{'ID':<34} {'Item':<34} {'User':<16} {'Qty':>4} {'Due':<17} {'Returned':<17}")
    click.echo("-" * 127)
    for b in rows:
        click.echo(
            f"{b.id:<34} {b.item_id:<34} {b.user_id:<16} {b.quantity:>4} "
            f"{fmt(b.due_date):<17} {fmt(b.returned_at):<17}"
        )


@click.command("borrow")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--group", "group_id", required=True, help="Group ID.")
@click.option("--quantity", default=1, type=int, show_default=True)
@click.option("--due", "due_date", required=True, type=DATETIME, help="Due date.")
@click.option("--condition", required=True, type=click.Choice(CONDITIONS))
@click.option("--condition-url", default=None, help="Evidence URL.")
@click.pass_obj
def borrowing_borrow(actor, item_id, group_id, quantity, due_date, condition, condition_url) -> None:
    """Borrow a medium item, or a high item with an approved request."""
    handler = BorrowItemHandler(unit_of_work(), authorizer())
    try:
        dto = handler.handle(
            actor, item_id, group_id, quantity,
            due_date=utc(due_date),
            before_condition=condition,
            before_condition_url=condition_url,
        )
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Borrowing {dto.id} opened, due {fmt(dto.due_date)}")


@click.command("return")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--condition", default=None, type=click.Choice(CONDITIONS))
@click.option("--condition-url", default=None, help="Evidence URL.")
@click.pass_obj
def borrowing_return(actor, item_id, condition, condition_url) -> None:
    """Return an item you borrowed."""
    handler = ReturnItemHandler(unit_of_work(), authorizer())
    try:
        dto = handler.handle(actor, item_id, condition, condition_url)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Borrowing {dto.id} returned at {fmt(dto.returned_at)}")


@click.command("status")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--group", "group_id", default=None, help="Group ID.")
@click.pass_obj
def borrowing_status(actor, item_id, group_id) -> None:
    """Check whether an item is currently out."""
    try:
        available = CheckBorrowingStatusHandler(unit_of_work(), authorizer()).handle(
            actor, item_id, group_id
        )
    except DomainException as exc:
        raise click_error(exc)

    click.echo("available" if available else "borrowed")


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this user's borrowings.")
@click.option("--mine", is_flag=True, default=False, help="Only your own borrowings.")
@click.option(
    "--state", type=click.Choice([s.value for s in BorrowingState]), default="all",
    show_default=True,
)
@click.pass_obj
def borrowing_list(actor, user_id, mine, state) -> None:
    """List borrowings."""
    if mine:
        user_id = actor
    try:
        rows = ListBorrowingsHandler(unit_of_work(), authorizer()).handle(
            actor, user_id=user_id, state=BorrowingState(state)
        )
    except DomainException as exc:
        raise click_error(exc)

    _display(rows)


@click.command("due")
@click.option("--by", "due_by", required=True, type=DATETIME, help="Due on or before.")
@click.pass_obj
def borrowing_due(actor, due_by) -> None:
    """List active borrowings due by a date."""
    try:
        rows = ListDueBorrowingsHandler(unit_of_work(), authorizer()).handle(actor, utc(due_by))
    except DomainException as exc:
        raise click_error(exc)

    _display(rows)
