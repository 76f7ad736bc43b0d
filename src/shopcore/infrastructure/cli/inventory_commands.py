"""CLI commands for inventory management."""

from __future__ import annotations

import click

from shopcore.application.restock_inventory import RestockInventoryHandler
from shopcore.application.show_inventory import ShowInventoryHandler
from shopcore.domain.exceptions import DomainException
from shopcore.infrastructure.bootstrap import inventory_ledger, product_repository


@click.command("restock")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units of new supply.")
def inventory_restock(product_id: str, quantity: int) -> None:
    """Add supply for a product."""
    handler = RestockInventoryHandler(
        ledger=inventory_ledger(),
        product_repo=product_repository(),
    )

    try:
        available = handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} restocked: {available} available")


@click.command("show")
def inventory_show() -> None:
    """Show current inventory levels."""
    handler = ShowInventoryHandler(ledger=inventory_ledger())
    lines = handler.handle()

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'ID':<6} {'Product':<20} {'Total':>8} {'Reserved':>10} {'Available':>10}")
    click.echo("-" * 57)
    for line in lines:
        click.echo(
            f"{line.product_id:<6} {line.product_name:<20} {line.total:>8} "
            f"{line.reserved:>10} {line.available:>10}"
        )
