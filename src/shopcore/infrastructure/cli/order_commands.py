"""CLI commands for checkout and the Order aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from shopcore.application.cancel_order import CancelOrderHandler
from shopcore.application.checkout import CheckoutHandler
from shopcore.application.confirm_order import ConfirmOrderHandler
from shopcore.application.dto import OrderDTO
from shopcore.application.set_order_status import SetOrderStatusHandler
from shopcore.application.show_order import ShowOrderHandler
from shopcore.domain.exceptions import DomainException
from shopcore.domain.model.order import OrderStatus
from shopcore.infrastructure.bootstrap import (
    cart_repository,
    inventory_ledger,
    order_locks,
    order_repository,
    product_repository,
    user_locks,
)

order_id_option = click.option("--id", "order_id", required=True, type=int, help="Order ID.")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


@click.command("checkout")
@click.option("--user", "user_id", required=True, help="Acting user ID.")
def checkout(user_id: str) -> None:
    """Place an order from the user's cart (reserves stock)."""
    handler = CheckoutHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        order_repo=order_repository(),
        ledger=inventory_ledger(),
        user_locks=user_locks(),
    )

    try:
        dto = handler.handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("show")
@order_id_option
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this user's orders.")
@click.option(
    "--status",
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    default=None,
    help="Only orders in this status.",
)
def order_list(user_id: str | None, status: str | None) -> None:
    """List orders, newest first."""
    handler = ShowOrderHandler(order_repo=order_repository())

    if user_id is not None:
        orders = handler.list_by_user(user_id)
    elif status is not None:
        orders = handler.list_by_status(status)
    else:
        orders = handler.list_all()
    if user_id is not None and status is not None:
        orders = [o for o in orders if o.status == status.upper()]

    _echo_orders(orders)


def _echo_orders(orders: list[OrderDTO]) -> None:
    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'User':<15} {'Status':<10} {'Total':>12} {'Created':>22}")
    click.echo("-" * 69)
    for o in orders:
        click.echo(f"{o.id:<6} {o.user_id:<15} {o.status:<10} {o.total:>12} {o.created_at:>22}")


@click.command("between")
@click.option("--from", "start", required=True, type=click.DateTime(), help="Earliest creation time (UTC).")
@click.option("--to", "end", required=True, type=click.DateTime(), help="Latest creation time (UTC).")
def order_between(start: datetime, end: datetime) -> None:
    """List orders created in a date range, newest first."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        orders = handler.list_between(start, end)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_orders(orders)


@click.command("confirm")
@order_id_option
def order_confirm(order_id: int) -> None:
    """Confirm a pending order."""
    handler = ConfirmOrderHandler(order_repo=order_repository(), order_locks=order_locks())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} confirmed.")


@click.command("cancel")
@order_id_option
def order_cancel(order_id: int) -> None:
    """Cancel an order (returns its stock)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        ledger=inventory_ledger(),
        order_locks=order_locks(),
    )

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled, stock released.")


@click.command("status")
@order_id_option
@click.option(
    "--set",
    "status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    help="New status.",
)
def order_status(order_id: int, status: str) -> None:
    """Move an order to a new status."""
    handler = SetOrderStatusHandler(
        order_repo=order_repository(),
        ledger=inventory_ledger(),
        order_locks=order_locks(),
    )

    try:
        handler.handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {status.upper()}.")
