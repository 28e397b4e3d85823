import click

from lending.infrastructure.cli.admin_commands import admin_grant, admin_init_db, time_slot
from lending.infrastructure.cli.availability_commands import (
    availability_add,
    availability_delete,
)
from lending.infrastructure.cli.booking_commands import (
    booking_cancel,
    booking_confirm,
    booking_expire,
    booking_list,
    booking_mine,
    booking_pending,
    booking_show,
)
from lending.infrastructure.cli.borrowing_commands import (
    borrowing_borrow,
    borrowing_due,
    borrowing_list,
    borrowing_return,
    borrowing_status,
)
from lending.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
    checkout,
)
from lending.infrastructure.cli.item_commands import item_add, item_list
from lending.infrastructure.cli.request_commands import (
    request_list,
    request_review,
    request_submit,
)
from lending.infrastructure.config import get_settings
from lending.infrastructure.log_config import configure_logging


@click.group()
@click.option(
    "--as", "actor", envvar="LENDING_ACTOR", default=None,
    help="Acting user ID (or set LENDING_ACTOR).",
)
@click.pass_context
def cli(ctx: click.Context, actor: str | None) -> None:
    """Lending — resource lending and booking engine"""
    configure_logging(get_settings().log_level)
    ctx.obj = actor


@cli.group()
def admin() -> None:
    """Database and permission administration."""


@cli.group()
def item() -> None:
    """Manage the item catalog."""


@cli.group()
def cart() -> None:
    """Manage your cart."""


@cli.group()
def borrowing() -> None:
    """Borrow and return items."""


@cli.group()
def request() -> None:
    """Request high-tier items and review requests."""


@cli.group()
def availability() -> None:
    """Declare when you are available for pickups."""


@cli.group()
def booking() -> None:
    """View and manage bookings."""


# Register subcommands
admin.add_command(admin_init_db)
admin.add_command(admin_grant)
admin.add_command(time_slot)
item.add_command(item_add)
item.add_command(item_list)
cart.add_command(cart_add)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_clear)
cart.add_command(cart_show)
cli.add_command(checkout)
borrowing.add_command(borrowing_borrow)
borrowing.add_command(borrowing_return)
borrowing.add_command(borrowing_status)
borrowing.add_command(borrowing_list)
borrowing.add_command(borrowing_due)
request.add_command(request_submit)
request.add_command(request_review)
request.add_command(request_list)
availability.add_command(availability_add)
availability.add_command(availability_delete)
booking.add_command(booking_show)
booking.add_command(booking_list)
booking.add_command(booking_mine)
booking.add_command(booking_pending)
booking.add_command(booking_confirm)
booking.add_command(booking_cancel)
booking.add_command(booking_expire)
