"""CLI commands for bookings."""

from __future__ import annotations

import click

from lending.application.cancel_booking import CancelBookingHandler
from lending.application.confirm_booking import ConfirmBookingHandler
from lending.application.expire_bookings import ExpireBookingsHandler
from lending.application.list_bookings import (
    ListBookingsHandler,
    ListMyBookingsHandler,
    ListPendingConfirmationHandler,
)
from lending.application.show_booking import ShowBookingHandler
from lending.domain.exceptions import DomainException
from lending.domain.model.booking import BookingStatus
from lending.infrastructure.bootstrap import authorizer, unit_of_work
from lending.infrastructure.cli.common import DATE, click_error, fmt

_STATUS = click.Choice([s.value for s in BookingStatus])


def _display(rows) -> None:
    if not rows:
        click.echo("No bookings found.")
        return
    click.echo(f"{'ID':<34} {'Item':<34} {'Requester':<16} {'Pickup':<17} {'Status':<20}")
    click.echo("-" * 125)
    for b in rows:
        click.echo(
            f"{b.id:<34} {b.item_id:<34} {b.requester_id:<16} "
            f"{fmt(b.pickup_at):<17} {b.status:<20}"
        )


@click.command("show")
@click.option("--id", "booking_id", required=True, help="Booking ID.")
@click.pass_obj
def booking_show(actor, booking_id) -> None:
    """Show one booking."""
    try:
        b = ShowBookingHandler(unit_of_work(), authorizer()).handle(actor, booking_id)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Booking {b.id}  (status={b.status})")
    click.echo(f"Item:      {b.item_id}")
    click.echo(f"Requester: {b.requester_id}")
    click.echo(f"Manager:   {b.manager_id or '-'}")
    click.echo(f"Pickup:    {fmt(b.pickup_at)} at {b.pickup_location}")
    click.echo(f"Return:    {fmt(b.return_at)} at {b.return_location}")
    click.echo(f"Created:   {fmt(b.created_at)}")
    if b.confirmed_at:
        click.echo(f"Confirmed: {fmt(b.confirmed_at)} by {b.confirmed_by}")


@click.command("list")
@click.option("--status", type=_STATUS, default=None)
@click.option("--group", "group_id", default=None, help="Group ID.")
@click.option("--from", "from_date", type=DATE, default=None, help="Pickup on or after.")
@click.option("--to", "to_date", type=DATE, default=None, help="Pickup on or before.")
@click.pass_obj
def booking_list(actor, status, group_id, from_date, to_date) -> None:
    """List bookings you can see."""
    try:
        rows = ListBookingsHandler(unit_of_work(), authorizer()).handle(
            actor,
            status=status,
            group_id=group_id,
            from_date=from_date.date() if from_date else None,
            to_date=to_date.date() if to_date else None,
        )
    except DomainException as exc:
        raise click_error(exc)

    _display(rows)


@click.command("mine")
@click.option("--status", type=_STATUS, default=None)
@click.pass_obj
def booking_mine(actor, status) -> None:
    """List your own bookings."""
    try:
        rows = ListMyBookingsHandler(unit_of_work()).handle(actor, status)
    except DomainException as exc:
        raise click_error(exc)

    _display(rows)


@click.command("pending")
@click.option("--group", "group_id", default=None, help="Group ID.")
@click.pass_obj
def booking_pending(actor, group_id) -> None:
    """List bookings awaiting confirmation."""
    try:
        rows = ListPendingConfirmationHandler(unit_of_work(), authorizer()).handle(
            actor, group_id
        )
    except DomainException as exc:
        raise click_error(exc)

    _display(rows)


@click.command("confirm")
@click.option("--id", "booking_id", required=True, help="Booking ID.")
@click.pass_obj
def booking_confirm(actor, booking_id) -> None:
    """Confirm your booking (within 48 hours, before pickup)."""
    try:
        b = ConfirmBookingHandler(unit_of_work()).handle(actor, booking_id)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Booking {b.id} confirmed; pickup {fmt(b.pickup_at)} at {b.pickup_location}")


@click.command("cancel")
@click.option("--id", "booking_id", required=True, help="Booking ID.")
@click.pass_obj
def booking_cancel(actor, booking_id) -> None:
    """Cancel a booking."""
    try:
        b = CancelBookingHandler(unit_of_work(), authorizer()).handle(actor, booking_id)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Booking {b.id} cancelled.")


@click.command("expire")
@click.pass_obj
def booking_expire(actor) -> None:
    """Cancel bookings whose confirmation window has passed."""
    try:
        expired = ExpireBookingsHandler(unit_of_work(), authorizer()).handle(actor)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"{len(expired)} booking(s) expired.")
    for booking_id in expired:
        click.echo(f"  {booking_id}")
