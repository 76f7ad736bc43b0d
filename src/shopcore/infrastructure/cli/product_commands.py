"""CLI commands for browsing the catalog."""

from __future__ import annotations

import click

from shopcore.infrastructure.bootstrap import inventory_ledger, product_repository


@click.command("list")
def product_list() -> None:
    """List all products with their advisory stock."""
    products = product_repository().list_all()
    ledger = inventory_ledger()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10} {'In stock':>10}")
    click.echo("-" * 49)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {str(p.price):>10} {ledger.peek(p.id):>10}")
