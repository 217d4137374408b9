"""CLI commands for the Order aggregate."""

from __future__ import annotations

import json

import click

from fbo.application.cancel_order import CancelOrderHandler
from fbo.application.dto import OrderDTO
from fbo.application.show_order import ShowOrderHandler
from fbo.domain.exceptions import DomainException
from fbo.infrastructure.bootstrap import admit_orders_handler, store


@click.command("create")
@click.option(
    "--file", "payload_file", type=click.File("r"), default="-",
    help="JSON payload: an order, a list of orders or {shop, items}. Defaults to stdin.",
)
@click.pass_context
def order_create(ctx: click.Context, payload_file) -> None:
    """Admit orders, reserving the stock they need."""
    try:
        payload = json.load(payload_file)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Payload is not valid JSON: {exc}")

    response = admit_orders_handler().respond(payload)
    click.echo(json.dumps(response.body, indent=2))
    if not response.ok:
        ctx.exit(1)


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.order_number}  (status={dto.status})")
    click.echo(f"Shop:     {dto.shop or '-'}")
    click.echo(f"Factory:  {dto.assigned_factory or '-'}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Furniture':<12} {'Back model':<16} {'Headrest':>8} {'Qty':>5}")
    click.echo(f"  {'-'*44}")
    click.echo(
        f"  {(dto.furniture_type or dto.type or '-'):<12} {(dto.back_model or '-'):<16} "
        f"{'yes' if dto.headrest else 'no':>8} {dto.quantity:>5}"
    )
    if dto.audit:
        click.echo()
        click.echo("Audit:")
        for entry in dto.audit:
            note = f"  ({entry.note})" if entry.note else ""
            click.echo(f"  {entry.timestamp}  {entry.actor} [{entry.role}] {entry.action}{note}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=store().orders)

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--actor", required=True, help="Who is cancelling.")
@click.option("--role", default="admin", show_default=True, help="Role of the actor.")
@click.option("--note", default=None, help="Reason recorded in the audit trail.")
def order_cancel(order_id: int, actor: str, role: str, note: str | None) -> None:
    """Cancel an order and return its reserved stock."""
    json_store = store()
    handler = CancelOrderHandler(order_repo=json_store.orders, stock_repo=json_store.stock)

    try:
        dto = handler.handle(order_id, actor=actor, role=role, note=note)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} {dto.order_number} cancelled, stock released.")
