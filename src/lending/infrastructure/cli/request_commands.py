"""CLI commands for approval requests."""

from __future__ import annotations

import click

from lending.application.dto import BookingFields
from lending.application.list_requests import ListRequestsHandler, RequestScope
from lending.application.review_request import ReviewRequestHandler
from lending.application.submit_request import SubmitRequestHandler
from lending.domain.exceptions import DomainException
from lending.infrastructure.bootstrap import authorizer, unit_of_work
from lending.infrastructure.cli.common import click_error, fmt


@click.command("submit")
@click.option("--item", "item_id", required=True, help="High-tier item ID.")
@click.option("--group", "group_id", required=True, help="Group ID.")
@click.option("--quantity", default=1, type=int, show_default=True)
@click.pass_obj
def request_submit(actor, item_id, group_id, quantity) -> None:
    """Ask to borrow a high-tier item."""
    try:
        dto = SubmitRequestHandler(unit_of_work(), authorizer()).handle(
            actor, item_id, group_id, quantity
        )
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Request {dto.id} submitted (status={dto.status})")


@click.command("review")
@click.option("--id", "request_id", required=True, help="Request ID.")
@click.option("--decision", required=True, type=click.Choice(["approved", "denied"]))
@click.option("--availability", "availability_id", default=None, help="Availability ID.")
@click.option("--pickup-location", default=None)
@click.option("--return-location", default=None)
@click.pass_obj
def request_review(actor, request_id, decision, availability_id, pickup_location, return_location) -> None:
    """Approve or deny a pending request.

    Approving a high-tier item needs --availability, --pickup-location
    and --return-location; a booking is scheduled from them.
    """
    fields = BookingFields(
        availability_id=availability_id,
        pickup_location=pickup_location,
        return_location=return_location,
    )
    try:
        dto = ReviewRequestHandler(unit_of_work(), authorizer()).handle(
            actor, request_id, decision, fields
        )
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Request {dto.id} {dto.status}")
    if dto.booking_id:
        click.echo(f"Booking {dto.booking_id} awaiting confirmation")


@click.command("list")
@click.option(
    "--scope", type=click.Choice([s.value for s in RequestScope]), default="mine",
    show_default=True,
)
@click.pass_obj
def request_list(actor, scope) -> None:
    """List requests."""
    try:
        rows = ListRequestsHandler(unit_of_work(), authorizer()).handle(
            actor, RequestScope(scope)
        )
    except DomainException as exc:
        raise click_error(exc)

    if not rows:
        click.echo("No requests found.")
        return
    click.echo(f"{'ID':<34} {'Item':<34} {'User':<16} {'Qty':>4} {'Status':<9} {'Requested':<17}")
    click.echo("-" * 119)
    for r in rows:
        click.echo(
            f"{r.id:<34} {r.item_id:<34} {r.user_id:<16} {r.quantity:>4} "
            f"{r.status:<9} {fmt(r.requested_at):<17}"
        )
