import click

from shopcore.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_dec,
    cart_inc,
    cart_list,
    cart_remove,
    cart_set,
)
from shopcore.infrastructure.cli.inventory_commands import inventory_restock, inventory_show
from shopcore.infrastructure.cli.order_commands import (
    checkout,
    order_between,
    order_cancel,
    order_confirm,
    order_list,
    order_show,
    order_status,
)
from shopcore.infrastructure.cli.product_commands import product_list
from shopcore.infrastructure.cli.report_commands import (
    report_best_sellers,
    report_revenue,
    report_spent,
)
from shopcore.infrastructure.config import load_settings
from shopcore.infrastructure.logging_setup import configure_logging


@click.group()
def cli() -> None:
    """shopcore — storefront order processing"""
    configure_logging(load_settings())


@cli.group()
def cart() -> None:
    """Manage a user's cart."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Browse products."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def report() -> None:
    """Sales reports."""


# Register subcommands
cli.add_command(checkout)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_dec)
cart.add_command(cart_inc)
cart.add_command(cart_list)
cart.add_command(cart_remove)
cart.add_command(cart_set)
order.add_command(order_between)
order.add_command(order_cancel)
order.add_command(order_confirm)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_list)
inventory.add_command(inventory_restock)
inventory.add_command(inventory_show)
report.add_command(report_best_sellers)
report.add_command(report_revenue)
report.add_command(report_spent)
