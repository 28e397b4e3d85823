"""CLI commands for reviewer availability."""

from __future__ import annotations

import click

from lending.application.manage_availability import (
    CreateAvailabilityHandler,
    DeleteAvailabilityHandler,
)
from lending.domain.exceptions import DomainException
from lending.infrastructure.bootstrap import authorizer, unit_of_work
from lending.infrastructure.cli.common import DATE, click_error


@click.command("add")
@click.option("--slot", "time_slot_id", required=True, help="Time slot ID.")
@click.option("--date", "on", required=True, type=DATE, help="Date (YYYY-MM-DD).")
@click.option("--group", "group_id", default=None, help="Group ID.")
@click.pass_obj
def availability_add(actor, time_slot_id, on, group_id) -> None:
    """Declare availability for a time slot on a date."""
    try:
        availability = CreateAvailabilityHandler(unit_of_work(), authorizer()).handle(
            actor, time_slot_id, on.date(), group_id
        )
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Availability {availability.id} added for {availability.date}")


@click.command("delete")
@click.option("--id", "availability_id", required=True, help="Availability ID.")
@click.pass_obj
def availability_delete(actor, availability_id) -> None:
    """Withdraw an availability."""
    try:
        DeleteAvailabilityHandler(unit_of_work(), authorizer()).handle(actor, availability_id)
    except DomainException as exc:
        raise click_error(exc)

    click.echo(f"Availability {availability_id} deleted.")
