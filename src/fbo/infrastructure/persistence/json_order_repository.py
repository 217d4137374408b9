"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime

from fbo.domain.model.order import AuditEntry, Order, OrderStatus
from fbo.domain.model.stock import Reservation
from fbo.domain.repository.order_repository import OrderRepository
from fbo.infrastructure.persistence.json_file import JsonCollection


class JsonOrderRepository(JsonCollection, OrderRepository):

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        with self._lock:
            orders = self._load_raw()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        with self._lock:
            orders = self._load_raw()
        for raw in orders:
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        with self._lock:
            orders = self._load_raw()
        return [self._to_domain(raw) for raw in orders]

    def save(self, order: Order) -> None:
        with self._lock:
            orders = self._load_raw()

            if order.id is None:
                order.id = self.next_id()

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    replaced = True
                    break
            if not replaced:
                orders.append(self._to_raw(order))

            self._persist_raw(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "orderNumber": order.order_number,
            "status": order.status.value,
            "quantity": order.quantity,
            "furnitureType": order.furniture_type,
            "type": order.type,
            "backModel": order.back_model,
            "headrest": order.headrest,
            "shop": order.shop,
            "shopkeeper": order.shopkeeper,
            "assignedFactory": order.assigned_factory,
            "customerName": order.customer_name,
            "customerPhone": order.customer_phone,
            "customerEmail": order.customer_email,
            "deliveryAddress": order.delivery_address,
            "notes": order.notes,
            "date": order.date,
            "createdAt": order.created_at.isoformat(),
            "reservations": [
                {"stockId": r.record_id, "type": r.component_type, "amount": r.amount}
                for r in order.reservations
            ],
            "audit": [
                {
                    "actor": entry.actor,
                    "role": entry.role,
                    "action": entry.action,
                    "timestamp": entry.timestamp.isoformat(),
                    "note": entry.note,
                }
                for entry in order.audit
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            order_number=raw["orderNumber"],
            quantity=raw["quantity"],
            furniture_type=raw.get("furnitureType"),
            type=raw.get("type"),
            back_model=raw.get("backModel"),
            headrest=raw.get("headrest", False),
            shop=raw.get("shop"),
            shopkeeper=raw.get("shopkeeper"),
            status=OrderStatus(raw["status"]),
            assigned_factory=raw.get("assignedFactory"),
            customer_name=raw.get("customerName"),
            customer_phone=raw.get("customerPhone"),
            customer_email=raw.get("customerEmail"),
            delivery_address=raw.get("deliveryAddress"),
            notes=raw.get("notes"),
            date=raw.get("date"),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            reservations=[
                Reservation(str(r["stockId"]), r["type"], r["amount"])
                for r in raw.get("reservations", [])
            ],
            audit=[
                AuditEntry(
                    actor=a["actor"],
                    role=a["role"],
                    action=a["action"],
                    timestamp=datetime.fromisoformat(a["timestamp"]),
                    note=a.get("note"),
                )
                for a in raw.get("audit", [])
            ],
        )
