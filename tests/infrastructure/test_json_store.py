"""Tests for the JSON-file store and its repositories."""

import json
import multiprocessing
from datetime import datetime, timezone

import pytest

from fbo.domain.exceptions import TransactionsUnsupportedError, ValidationError
from fbo.domain.model.order import Order, OrderRequest, OrderStatus
from fbo.domain.model.stock import Reservation, StockQuery, StockRecord
from fbo.infrastructure.persistence.json_store import JsonStore


@pytest.fixture
def store(tmp_path):
    json_store = JsonStore(tmp_path, transactional=True)
    json_store.stock.add(StockRecord(id="1", component_type="seat", quantity=5))
    json_store.stock.add(StockRecord(id="2", component_type="back", model="Mesh", quantity=3, furniture_type="sofa"))
    json_store.stock.add(StockRecord(id="3", component_type="seat", quantity=9, shop="S1"))
    return json_store


class TestJsonStockRepository:

    def test_creates_empty_collections(self, tmp_path):
        JsonStore(tmp_path / "fresh")
        for name in ("stock.json", "orders.json", "handlers.json"):
            assert json.loads((tmp_path / "fresh" / name).read_text()) == []

    def test_persists_camel_case_keys(self, store):
        [raw] = [r for r in json.loads(store.stock.file_path.read_text()) if r["id"] == "2"]
        assert raw == {
            "id": "2",
            "type": "back",
            "model": "Mesh",
            "furnitureType": "sofa",
            "shop": None,
            "quantity": 3,
            "lowStock": 10,
        }

    def test_find_respects_scope(self, store):
        assert [r.id for r in store.stock.find(StockQuery("seat"))] == ["1"]
        assert [r.id for r in store.stock.find(StockQuery("seat", shop="S1"))] == ["3"]

    def test_next_id(self, store):
        assert store.stock.next_id() == "4"

    def test_next_id_ignores_imported_ids(self, tmp_path):
        (tmp_path / "stock.json").write_text(json.dumps([
            {"id": "64f1c0ffee", "type": "seat", "quantity": 1},
            {"id": 7, "type": "arm", "quantity": 1},
        ]))
        json_store = JsonStore(tmp_path)
        assert json_store.stock.next_id() == "8"
        assert json_store.stock.get_by_id("7").component_type == "arm"
        assert json_store.stock.increment("7", 2).quantity == 3

    def test_writes_leave_no_temp_files(self, store):
        store.stock.decrement_first(StockQuery("seat"), 1)
        assert not list(store.stock.file_path.parent.glob("*.tmp"))

    def test_add_rejects_duplicate_id(self, store):
        with pytest.raises(ValidationError):
            store.stock.add(StockRecord(id="1", component_type="arm"))

    def test_decrement_first_takes_stock(self, store):
        record = store.stock.decrement_first(StockQuery("seat"), 5)
        assert record.id == "1"
        assert record.quantity == 0
        assert store.stock.get_by_id("1").quantity == 0

    def test_decrement_first_refuses_insufficient(self, store):
        assert store.stock.decrement_first(StockQuery("seat"), 6) is None
        assert store.stock.get_by_id("1").quantity == 5

    def test_decrement_first_matches_model_case_insensitively(self, store):
        record = store.stock.decrement_first(StockQuery("back", model="mesh"), 1)
        assert record.id == "2"
        assert record.quantity == 2

    def test_increment(self, store):
        assert store.stock.increment("1", 4).quantity == 9

    def test_increment_missing_record(self, store):
        assert store.stock.increment("99", 1) is None

    def test_rejects_non_positive_adjustments(self, store):
        with pytest.raises(ValidationError):
            store.stock.increment("1", 0)
        with pytest.raises(ValidationError):
            store.stock.decrement_first(StockQuery("seat"), -1)


class TestJsonOrderRepository:

    def _order(self) -> Order:
        request = OrderRequest(
            quantity=2, furniture_type="chair", back_model="Mesh", headrest=True,
            shop="S1", customer_name="Asha",
        )
        return Order.create(
            request, quantity=2, order_number="ORD-1",
            created_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
        )

    def test_save_assigns_id_and_round_trips(self, store):
        order = self._order()
        store.orders.save(order)
        assert order.id == 1

        loaded = store.orders.get_by_id(1)
        assert loaded.order_number == "ORD-1"
        assert loaded.status == OrderStatus.REQUESTED
        assert loaded.headrest is True
        assert loaded.customer_name == "Asha"
        assert loaded.created_at == datetime(2026, 1, 5, tzinfo=timezone.utc)

    def test_save_upserts_with_audit(self, store):
        order = self._order()
        store.orders.save(order)
        order.cancel("u-1", "admin", note="duplicate")
        store.orders.save(order)

        [loaded] = store.orders.list_all()
        assert loaded.status == OrderStatus.CANCELLED
        [entry] = loaded.audit
        assert (entry.actor, entry.role, entry.action, entry.note) == ("u-1", "admin", "cancelled", "duplicate")

    def test_reservations_round_trip(self, store):
        order = self._order()
        order.reservations = [Reservation("2", "back", 2), Reservation("1", "seat", 2)]
        store.orders.save(order)

        raw = json.loads(store.orders.file_path.read_text())[0]
        assert raw["reservations"][0] == {"stockId": "2", "type": "back", "amount": 2}
        assert store.orders.get_by_id(1).reservations == order.reservations

    def test_missing_order(self, store):
        assert store.orders.get_by_id(7) is None


class TestJsonHandlerDirectory:

    def test_first_active_handler_for_role(self, store):
        store.handlers.file_path.write_text(json.dumps([
            {"id": "h1", "name": "Old", "role": "factory", "status": "inactive"},
            {"id": "h2", "name": "Courier", "role": "driver"},
            {"id": "h3", "name": "Main", "role": "factory"},
        ]))
        assert store.handlers.find_one("factory").id == "h3"
        assert store.handlers.find_one("admin") is None


class TestJsonStoreTransactions:

    def test_capabilities(self, tmp_path):
        assert JsonStore(tmp_path / "a", transactional=True).capabilities().transactions
        assert not JsonStore(tmp_path / "b").capabilities().transactions

    def test_standalone_store_refuses(self, tmp_path):
        with pytest.raises(TransactionsUnsupportedError):
            with JsonStore(tmp_path).transaction():
                pass

    def test_commit_keeps_writes(self, store):
        with store.transaction():
            store.stock.decrement_first(StockQuery("seat"), 2)
        assert store.stock.get_by_id("1").quantity == 3

    def test_abort_restores_every_collection(self, store):
        order = Order.create(OrderRequest(quantity=1), quantity=1, order_number="ORD-X")
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.stock.decrement_first(StockQuery("seat"), 2)
                store.orders.save(order)
                raise RuntimeError("boom")
        assert store.stock.get_by_id("1").quantity == 5
        assert store.orders.list_all() == []


def _drain_seats(data_dir, attempts, results):
    json_store = JsonStore(data_dir)
    taken = 0
    for _ in range(attempts):
        if json_store.stock.decrement_first(StockQuery("seat"), 1) is not None:
            taken += 1
    results.put(taken)


@pytest.mark.skipif(
    "fork" not in multiprocessing.get_all_start_methods(),
    reason="needs the fork start method",
)
def test_processes_never_oversell(tmp_path):
    JsonStore(tmp_path).stock.add(StockRecord(id="1", component_type="seat", quantity=200))
    ctx = multiprocessing.get_context("fork")
    results = ctx.Queue()
    workers = [ctx.Process(target=_drain_seats, args=(tmp_path, 60, results)) for _ in range(4)]
    for worker in workers:
        worker.start()
    taken = sum(results.get(timeout=60) for _ in workers)
    for worker in workers:
        worker.join(timeout=60)

    remaining = JsonStore(tmp_path).stock.get_by_id("1").quantity
    assert taken == 200
    assert remaining == 0
