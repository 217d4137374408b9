"""Unit tests for the Order aggregate."""

from datetime import datetime, timezone

import pytest

from fbo.domain.exceptions import ValidationError
from fbo.domain.model.order import Order, OrderRequest, OrderStatus
from fbo.domain.model.stock import Reservation


def _order(**overrides) -> Order:
    request = OrderRequest(quantity="2", furniture_type="chair", back_model="Mesh", shop="S1")
    order = Order.create(request, quantity=2, order_number="ORD-1", **overrides)
    return order


class TestOrderCreate:

    def test_requested_without_factory(self):
        order = _order()
        assert order.status == OrderStatus.REQUESTED
        assert order.assigned_factory is None
        assert order.audit == []
        assert order.id is None

    def test_assigned_with_factory(self):
        order = _order(assigned_factory="F1")
        assert order.status == OrderStatus.ASSIGNED
        assert order.assigned_factory == "F1"

    def test_keeps_preset_factory(self):
        request = OrderRequest(quantity=1, furniture_type="table", assigned_factory="F9")
        order = Order.create(request, quantity=1, order_number="ORD-2")
        assert order.assigned_factory == "F9"
        assert order.status == OrderStatus.ASSIGNED

    def test_copies_request_fields(self):
        created = datetime(2026, 1, 2, tzinfo=timezone.utc)
        order = _order(created_at=created)
        assert order.quantity == 2
        assert order.back_model == "Mesh"
        assert order.shop == "S1"
        assert order.created_at == created

    def test_keeps_reservations(self):
        taken = [Reservation("mesh", "back", 2), Reservation("seat", "seat", 2)]
        order = _order(reservations=taken)
        assert order.reservations == taken
        assert order.reservations is not taken

    def test_no_reservations_by_default(self):
        assert _order().reservations == []


class TestOrderCancel:

    def test_cancel_appends_audit(self):
        order = _order()
        order.cancel("alice", "admin", "customer changed mind")
        assert order.status == OrderStatus.CANCELLED
        assert len(order.audit) == 1
        entry = order.audit[0]
        assert (entry.actor, entry.role, entry.action, entry.note) == (
            "alice", "admin", "cancelled", "customer changed mind",
        )

    def test_cannot_cancel_twice(self):
        order = _order()
        order.cancel("alice", "admin")
        with pytest.raises(ValidationError, match="already cancelled"):
            order.cancel("alice", "admin")

    def test_cannot_cancel_delivered(self):
        order = _order()
        order.status = OrderStatus.DELIVERED
        with pytest.raises(ValidationError, match="delivered"):
            order.cancel("alice", "admin")

    def test_audit_is_append_only(self):
        order = _order()
        order.record("bob", "factory", "accepted")
        order.cancel("alice", "admin")
        assert [e.action for e in order.audit] == ["accepted", "cancelled"]
