import click

from fbo.infrastructure.bootstrap import settings
from fbo.infrastructure.cli.order_commands import order_cancel, order_create, order_show
from fbo.infrastructure.cli.stock_commands import stock_add, stock_show
from fbo.infrastructure.logging_config import configure_logging


@click.group()
def cli() -> None:
    """FBO: furniture back office"""
    configure_logging(settings().log_level)


@cli.group()
def order() -> None:
    """Admit and manage orders."""


@cli.group()
def stock() -> None:
    """Manage component and finished-part stock."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_show)
stock.add_command(stock_add)
stock.add_command(stock_show)
