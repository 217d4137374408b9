"""CLI commands for stock management."""

from __future__ import annotations

import click

from fbo.application.replenish_stock import ReplenishStockHandler
from fbo.application.show_stock import ShowStockHandler
from fbo.domain.exceptions import DomainException
from fbo.infrastructure.bootstrap import store


@click.command("add")
@click.option("--type", "component_type", required=True, help="Component type, e.g. seat, back, product.")
@click.option("--quantity", required=True, type=int, help="Units to add.")
@click.option("--model", default=None, help="Model name. Required for product; with --type back it names a back model.")
@click.option("--furniture-type", default="chair", show_default=True, help="Furniture category.")
@click.option("--shop", default=None, help="Owning shop; omit for factory-level stock.")
def stock_add(
    component_type: str,
    quantity: int,
    model: str | None,
    furniture_type: str,
    shop: str | None,
) -> None:
    """Replenish stock, creating the record on first use."""
    handler = ReplenishStockHandler(stock_repo=store().stock)

    try:
        record = handler.handle(
            component_type=component_type,
            quantity=quantity,
            model=model,
            furniture_type=furniture_type,
            shop=shop,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock #{record.id} {record.component_type} now at {record.quantity}")


@click.command("show")
@click.option("--shop", default=None, help="Only records owned by this shop.")
@click.option("--factory", "factory_only", is_flag=True, default=False, help="Only factory-level records.")
def stock_show(shop: str | None, factory_only: bool) -> None:
    """Show current stock levels."""
    handler = ShowStockHandler(stock_repo=store().stock)
    lines = handler.handle(shop=shop, all_scopes=not (shop or factory_only))

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(f"{'ID':<5} {'Type':<10} {'Model':<16} {'Furniture':<10} {'Shop':<10} {'Qty':>6}")
    click.echo("-" * 62)
    for line in lines:
        flag = "  LOW" if line.low else ""
        click.echo(
            f"{line.id:<5} {line.component_type:<10} {(line.model or '-'):<16} "
            f"{line.furniture_type:<10} {(line.shop or 'factory'):<10} {line.quantity:>6}{flag}"
        )
