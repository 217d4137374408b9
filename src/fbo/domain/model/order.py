"""Order aggregate and the ephemeral OrderRequest it is admitted from.

An Order is created exactly once, by the admission handler, after every
reservation for it has succeeded.  It keeps the stock records and amounts
it was served from in ``reservations``, so cancellation returns stock to
those same records.  Its ``audit`` trail is append-only and is carried
through every later workflow transition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from fbo.domain.exceptions import ValidationError
from fbo.domain.model.stock import Reservation


class OrderStatus(Enum):
    REQUESTED = "requested"
    ASSIGNED = "assigned"
    PROCESSING = "processing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


CANCELLABLE = (OrderStatus.REQUESTED, OrderStatus.ASSIGNED, OrderStatus.PROCESSING)


@dataclass(frozen=True)
class AuditEntry:
    actor: str
    role: str
    action: str
    timestamp: datetime
    note: str | None = None


@dataclass
class OrderRequest:
    """Input to admission for a single order.

    ``quantity`` holds the raw wire value; it is validated by the
    reservation engine, not here, so one bad order can be reported with its
    position in the batch.
    """

    quantity: Any
    furniture_type: str | None = None
    type: str | None = None
    back_model: str | None = None
    headrest: bool = False
    shop: str | None = None
    shopkeeper: str | None = None
    assigned_factory: str | None = None
    order_number: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    delivery_address: str | None = None
    notes: str | None = None
    date: str | None = None

    @property
    def category(self) -> str:
        """Lower-cased furniture category, falling back to ``type``."""
        return str(self.furniture_type or self.type or "").strip().lower()


@dataclass
class Order:
    """Aggregate root for admitted furniture orders.

    Use ``Order.create()`` for new orders.  The ``__init__`` is kept simple
    so repositories can reconstitute persisted orders in any status.
    """

    id: int | None
    order_number: str
    quantity: int
    furniture_type: str | None = None
    type: str | None = None
    back_model: str | None = None
    headrest: bool = False
    shop: str | None = None
    shopkeeper: str | None = None
    status: OrderStatus = OrderStatus.REQUESTED
    assigned_factory: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    delivery_address: str | None = None
    notes: str | None = None
    date: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reservations: list[Reservation] = field(default_factory=list)
    audit: list[AuditEntry] = field(default_factory=list)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        request: OrderRequest,
        quantity: int,
        order_number: str,
        assigned_factory: str | None = None,
        created_at: datetime | None = None,
        reservations: list[Reservation] | None = None,
    ) -> Order:
        factory = assigned_factory or request.assigned_factory
        return Order(
            id=None,
            order_number=order_number,
            quantity=quantity,
            furniture_type=request.furniture_type,
            type=request.type,
            back_model=request.back_model,
            headrest=bool(request.headrest),
            shop=request.shop,
            shopkeeper=request.shopkeeper,
            status=OrderStatus.ASSIGNED if factory else OrderStatus.REQUESTED,
            assigned_factory=factory,
            customer_name=request.customer_name,
            customer_phone=request.customer_phone,
            customer_email=request.customer_email,
            delivery_address=request.delivery_address,
            notes=request.notes,
            date=request.date,
            created_at=created_at or datetime.now(timezone.utc),
            reservations=list(reservations or []),
            audit=[],
        )

    # --- Audit ----------------------------------------------------------------

    def record(self, actor: str, role: str, action: str, note: str | None = None) -> AuditEntry:
        entry = AuditEntry(
            actor=actor,
            role=role,
            action=action,
            timestamp=datetime.now(timezone.utc),
            note=note,
        )
        self.audit.append(entry)
        return entry

    # --- State transitions ----------------------------------------------------

    def ensure_cancellable(self) -> None:
        if self.status == OrderStatus.CANCELLED:
            raise ValidationError("Order is already cancelled")
        if self.status not in CANCELLABLE:
            raise ValidationError(
                f"Cannot cancel order in {self.status.value} status"
            )

    def cancel(self, actor: str, role: str, note: str | None = None) -> None:
        """Transition requested|assigned|processing -> cancelled.

        Stock release must happen *before* calling this.
        """
        self.ensure_cancellable()
        self.status = OrderStatus.CANCELLED
        self.record(actor, role, "cancelled", note)

