"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from lending.domain.exceptions import DomainException
from lending.domain.model.value_objects import Condition

CONDITIONS = [c.value for c in Condition]
DATE = click.DateTime(formats=["%Y-%m-%d"])
DATETIME = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"])


def click_error(exc: DomainException) -> click.ClickException:
    return click.ClickException(f"{exc.code}: {exc}")


def utc(value: datetime | None) -> datetime | None:
    """Command-line timestamps are naive and read as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def fmt(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"
