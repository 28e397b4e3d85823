"""CLI commands for schema setup, permission grants and time slots."""

from __future__ import annotations

import click

from lending.application.manage_time_slots import CreateTimeSlotHandler, ListTimeSlotsHandler
from lending.domain.exceptions import DomainException
from lending.domain.service.authorizer import Permission
from lending.infrastructure.bootstrap import authorizer, create_schema, unit_of_work
from lending.infrastructure.cli.common import click_error

_TIME = click.DateTime(formats=["%H:%M"])


@click.command("init-db")
def admin_init_db() -> None:
    """Create the database tables."""
    create_schema()
    click.echo("Database initialised.")


@click.command("grant")
@click.option("--user", "user_id", required=True, help="User ID to grant to.")
@click.option(
    "--permission", required=True,
    type=click.Choice([p.value for p in Permission]),
    help="Permission to grant.",
)
@click.option("--scope", "scope_id", default=None, help="Group ID (omit for a global grant).")
def admin_grant(user_id: str, permission: str, scope_id: str | None) -> None:
    """Grant a permission to a user, globally or for one group."""
    authorizer().grant(user_id, Permission(permission), scope_id)
    click.echo(f"Granted {permission} to {user_id} ({scope_id or 'global'})")


@click.group("time-slot")
def time_slot() -> None:
    """Manage pickup time slots."""


@time_slot.command("add")
@click.option("--start", required=True, type=_TIME, help="Start time (HH:MM).")
@click.option("--end", required=True, type=_TIME, help="End time (HH:MM).")
@click.pass_obj
def time_slot_add(actor: str | None, start, end) -> None:
    """Create a time slot."""
    handler = CreateTimeSlotHandler(unit_of_work(), authorizer())
    try:
        slot = handler.handle(actor, start.time(), end.time())
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Time slot {slot.id} created ({slot.start_time:%H:%M}-{slot.end_time:%H:%M})")


@time_slot.command("list")
@click.pass_obj
def time_slot_list(actor: str | None) -> None:
    """List time slots."""
    try:
        slots = ListTimeSlotsHandler(unit_of_work()).handle(actor)
    except DomainException as exc:
        raise click_error(exc)

    if not slots:
        click.echo("No time slots defined.")
        return
    for slot in slots:
        click.echo(f"{slot.id}  {slot.start_time:%H:%M}-{slot.end_time:%H:%M}")
