"""Data Transfer Objects: plain containers that cross layer boundaries.

``as_payload()`` renders the wire shape (camelCase keys) consumed by the
order-creation endpoint and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fbo.domain.model.order import Order


@dataclass(frozen=True)
class AuditEntryDTO:

    actor: str
    role: str
    action: str
    timestamp: str
    note: str | None = None

    def as_payload(self) -> dict[str, Any]:
        return {
            "actor": self.actor,
            "role": self.role,
            "action": self.action,
            "timestamp": self.timestamp,
            "note": self.note,
        }


@dataclass(frozen=True)
class ReservationDTO:

    record_id: str
    component_type: str
    amount: int

    def as_payload(self) -> dict[str, Any]:
        return {"stockId": self.record_id, "type": self.component_type, "amount": self.amount}


@dataclass(frozen=True)
class OrderDTO:
    """Output: an admitted order as returned to the caller."""

    id: int
    order_number: str
    status: str
    quantity: int
    furniture_type: str | None
    type: str | None
    back_model: str | None
    headrest: bool
    shop: str | None
    shopkeeper: str | None
    assigned_factory: str | None
    customer_name: str | None
    customer_phone: str | None
    customer_email: str | None
    delivery_address: str | None
    notes: str | None
    date: str | None
    created_at: str
    reservations: list[ReservationDTO]
    audit: list[AuditEntryDTO]

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            status=order.status.value,
            quantity=order.quantity,
            furniture_type=order.furniture_type,
            type=order.type,
            back_model=order.back_model,
            headrest=order.headrest,
            shop=order.shop,
            shopkeeper=order.shopkeeper,
            assigned_factory=order.assigned_factory,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            customer_email=order.customer_email,
            delivery_address=order.delivery_address,
            notes=order.notes,
            date=order.date,
            created_at=order.created_at.isoformat(),
            reservations=[
                ReservationDTO(r.record_id, r.component_type, r.amount)
                for r in order.reservations
            ],
            audit=[
                AuditEntryDTO(
                    actor=entry.actor,
                    role=entry.role,
                    action=entry.action,
                    timestamp=entry.timestamp.isoformat(),
                    note=entry.note,
                )
                for entry in order.audit
            ],
        )

    def as_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "status": self.status,
            "quantity": self.quantity,
            "furnitureType": self.furniture_type,
            "type": self.type,
            "backModel": self.back_model,
            "headrest": self.headrest,
            "shop": self.shop,
            "shopkeeper": self.shopkeeper,
            "assignedFactory": self.assigned_factory,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "customerEmail": self.customer_email,
            "deliveryAddress": self.delivery_address,
            "notes": self.notes,
            "date": self.date,
            "createdAt": self.created_at,
            "reservations": [r.as_payload() for r in self.reservations],
            "audit": [entry.as_payload() for entry in self.audit],
        }


@dataclass(frozen=True)
class AdmissionResponse:
    """Output: status code and JSON body for an order-creation request."""

    status_code: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status_code < 400
