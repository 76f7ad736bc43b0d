"""CLI commands for sales reports."""

from __future__ import annotations

import click

from shopcore.application.sales_report import SalesReportHandler
from shopcore.infrastructure.bootstrap import order_repository


@click.command("revenue")
def report_revenue() -> None:
    """Total of all confirmed orders."""
    handler = SalesReportHandler(order_repo=order_repository())
    click.echo(f"Total revenue: {handler.total_revenue()}")


@click.command("spent")
@click.option("--user", "user_id", required=True, help="User ID.")
def report_spent(user_id: str) -> None:
    """Total a user has spent on confirmed orders."""
    handler = SalesReportHandler(order_repo=order_repository())
    click.echo(f"{user_id} has spent {handler.total_spent_by(user_id)}")


@click.command("best-sellers")
@click.option("--limit", default=10, show_default=True, type=int, help="Rows to show.")
def report_best_sellers(limit: int) -> None:
    """Products ranked by units sold."""
    handler = SalesReportHandler(order_repo=order_repository())
    rows = handler.best_selling_products(limit=limit)

    if not rows:
        click.echo("No sales yet.")
        return

    click.echo(f"{'ID':<6} {'Product':<20} {'Units':>8}")
    click.echo("-" * 36)
    for row in rows:
        click.echo(f"{row.product_id:<6} {row.product_name:<20} {row.units_sold:>8}")
