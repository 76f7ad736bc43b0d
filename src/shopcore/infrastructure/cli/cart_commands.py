"""CLI commands for the shopping cart.

``--user`` stands in for the authenticated caller supplied by the
surrounding application.
"""

from __future__ import annotations

import click

from shopcore.application.add_to_cart import AddToCartHandler
from shopcore.application.dto import CartLineDTO
from shopcore.application.remove_from_cart import ClearCartHandler, RemoveFromCartHandler
from shopcore.application.show_cart import ShowCartHandler
from shopcore.application.update_cart_line import UpdateCartLineHandler
from shopcore.domain.exceptions import DomainException
from shopcore.infrastructure.bootstrap import (
    cart_repository,
    inventory_ledger,
    product_repository,
    user_locks,
)

user_option = click.option("--user", "user_id", required=True, help="Acting user ID.")
line_option = click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")


def _update_handler() -> UpdateCartLineHandler:
    return UpdateCartLineHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        ledger=inventory_ledger(),
        user_locks=user_locks(),
    )


def _echo_line(dto: CartLineDTO | None, line_id: int) -> None:
    if dto is None:
        click.echo(f"Cart item #{line_id} removed.")
    else:
        click.echo(f"Cart item #{dto.id}: {dto.product_name} x{dto.quantity} = {dto.line_total}")


@click.command("add")
@user_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
def cart_add(user_id: str, product_id: str, quantity: int) -> None:
    """Add a product to the cart (merges with an existing line)."""
    handler = AddToCartHandler(
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        ledger=inventory_ledger(),
        user_locks=user_locks(),
    )

    try:
        dto = handler.handle(user_id=user_id, product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_line(dto, dto.id)


@click.command("list")
@user_option
def cart_list(user_id: str) -> None:
    """Show the cart, priced at current catalog prices."""
    handler = ShowCartHandler(cart_repo=cart_repository(), product_repo=product_repository())

    try:
        cart = handler.handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if cart.is_empty:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'Line':<6} {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*54}")
    for line in cart.lines:
        click.echo(
            f"  {line.id:<6} {line.product_name:<20} {line.quantity:>5} "
            f"{line.unit_price:>10} {line.line_total:>10}"
        )
    click.echo(f"  {'-'*54}")
    click.echo(f"  {'Cart Total':<34} {cart.total:>20}")


@click.command("set")
@user_option
@line_option
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes the line).")
def cart_set(user_id: str, line_id: int, quantity: int) -> None:
    """Set a cart line's quantity."""
    try:
        dto = _update_handler().set_quantity(user_id, line_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_line(dto, line_id)


@click.command("inc")
@user_option
@line_option
def cart_inc(user_id: str, line_id: int) -> None:
    """Add one unit to a cart line."""
    try:
        dto = _update_handler().increment(user_id, line_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_line(dto, line_id)


@click.command("dec")
@user_option
@line_option
def cart_dec(user_id: str, line_id: int) -> None:
    """Take one unit off a cart line (removes it at 1)."""
    try:
        dto = _update_handler().decrement(user_id, line_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_line(dto, line_id)


@click.command("remove")
@user_option
@line_option
def cart_remove(user_id: str, line_id: int) -> None:
    """Remove a line from the cart."""
    handler = RemoveFromCartHandler(cart_repo=cart_repository(), user_locks=user_locks())

    try:
        handler.handle(user_id, line_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart item #{line_id} removed.")


@click.command("clear")
@user_option
def cart_clear(user_id: str) -> None:
    """Empty the cart."""
    handler = ClearCartHandler(cart_repo=cart_repository(), user_locks=user_locks())
    handler.handle(user_id)
    click.echo("Cart cleared.")
