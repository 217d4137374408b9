"""Normalization of order-creation payloads.

Three shapes arrive at the boundary:

- a single order object,
- a list of order objects,
- a shop envelope ``{shop, items: [...]}`` whose items inherit the
  envelope's shop, shopkeeper and defaults.

Each is parsed into a tagged variant and then expanded into one flat list
of OrderRequest before any business logic runs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from fbo.domain.exceptions import AdmissionError, InvalidOrderError, NoOrdersError
from fbo.domain.model.order import OrderRequest

_QUANTITY_KEYS = ("quantity", "qty", "amount")
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SingleOrderPayload:
    order: Mapping[str, Any]


@dataclass(frozen=True)
class OrderListPayload:
    orders: tuple[Any, ...]


@dataclass(frozen=True)
class ShopBatchPayload:
    envelope: Mapping[str, Any]
    items: tuple[Any, ...]


OrderPayload = Union[SingleOrderPayload, OrderListPayload, ShopBatchPayload]


def parse_payload(raw: Any) -> OrderPayload:
    if isinstance(raw, Mapping):
        items = raw.get("items")
        if isinstance(items, Sequence) and not isinstance(items, (str, bytes)):
            return ShopBatchPayload(envelope=raw, items=tuple(items))
        return SingleOrderPayload(order=raw)
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return OrderListPayload(orders=tuple(raw))
    raise InvalidOrderError("payload_not_an_object", received=raw)


def expand(payload: OrderPayload) -> list[OrderRequest]:
    if isinstance(payload, SingleOrderPayload):
        return [_from_order(payload.order)]
    if isinstance(payload, OrderListPayload):
        return _indexed(payload.orders, _from_order)
    return _indexed(payload.items, lambda item: _from_item(payload.envelope, item))


def normalize_payload(raw: Any) -> list[OrderRequest]:
    """Parse and expand *raw*; an empty result is rejected."""
    requests = expand(parse_payload(raw))
    if not requests:
        raise NoOrdersError()
    return requests


# --- Internal helpers ---------------------------------------------------------


def _indexed(entries, build) -> list[OrderRequest]:
    requests = []
    for index, entry in enumerate(entries):
        try:
            requests.append(build(entry))
        except AdmissionError as exc:
            exc.order_index = index
            raise
    return requests


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def _require_mapping(entry: Any) -> Mapping[str, Any]:
    if not isinstance(entry, Mapping):
        raise InvalidOrderError("order_not_an_object", received=entry)
    return entry


def _from_order(entry: Any) -> OrderRequest:
    data = _require_mapping(entry)
    return OrderRequest(
        quantity=_first(data, *_QUANTITY_KEYS),
        furniture_type=_text(data.get("furnitureType")),
        type=_text(_first(data, "type", "category")),
        back_model=_text(_first(data, "backModel", "productModel")),
        headrest=_flag(data.get("headrest", False)),
        shop=_text(_first(data, "shop", "shopId")),
        shopkeeper=_text(_first(data, "shopkeeper", "user")),
        assigned_factory=_text(data.get("assignedFactory")),
        order_number=_text(data.get("orderNumber")),
        customer_name=_text(data.get("customerName")),
        customer_phone=_text(data.get("customerPhone")),
        customer_email=_text(data.get("customerEmail")),
        delivery_address=_text(data.get("deliveryAddress")),
        notes=_text(data.get("notes")),
        date=_text(data.get("date")),
    )


def _from_item(envelope: Mapping[str, Any], entry: Any) -> OrderRequest:
    item = _require_mapping(entry)

    def pick(*keys: str) -> str | None:
        return _text(_first(item, *keys) or _first(envelope, *keys))

    return OrderRequest(
        quantity=_first(item, *_QUANTITY_KEYS),
        furniture_type=pick("furnitureType"),
        type=_text(_first(item, "type", "category") or envelope.get("type")),
        back_model=_text(_first(item, "productModel", "backModel") or envelope.get("backModel")),
        headrest=_flag(item.get("headrest", False)),
        shop=_text(_first(envelope, "shop", "shopId")),
        shopkeeper=_text(_first(envelope, "shopkeeper", "user")),
        assigned_factory=pick("assignedFactory"),
        customer_name=pick("customerName"),
        customer_phone=pick("customerPhone"),
        customer_email=pick("customerEmail"),
        delivery_address=pick("deliveryAddress"),
        notes=pick("notes"),
        date=pick("date"),
    )
