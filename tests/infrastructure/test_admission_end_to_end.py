"""Chair admission over the JSON store, stocked through ReplenishStockHandler."""

import pytest

from fbo.application.cancel_order import CancelOrderHandler
from fbo.application.replenish_stock import ReplenishStockHandler
from fbo.infrastructure.bootstrap import admit_orders_handler
from fbo.infrastructure.persistence.json_store import JsonStore

COMPONENTS = ("back", "seat", "arm", "mechanism", "gaslift", "castor", "chrome", "headrest")


def _stocked_store(data_dir, transactional, castor=100):
    json_store = JsonStore(data_dir, transactional=transactional)
    replenish = ReplenishStockHandler(json_store.stock)
    for component in COMPONENTS:
        replenish.handle(component, castor if component == "castor" else 100)
    replenish.handle("back", 20, model="X")
    return json_store


def _quantities(json_store):
    return {(r.component_type, r.model): r.quantity for r in json_store.stock.list_all()}


@pytest.mark.parametrize("transactional", [True, False])
class TestChairAdmission:

    def test_admits_chair_with_back_model(self, tmp_path, transactional):
        json_store = _stocked_store(tmp_path, transactional)

        response = admit_orders_handler(json_store).respond(
            {"furnitureType": "chair", "quantity": 2, "backModel": "x", "headrest": True}
        )

        assert response.status_code == 200, response.body
        stock = _quantities(json_store)
        assert stock[("back", "X")] == 18
        assert stock[("back", None)] == 98
        assert stock[("arm", None)] == 96
        assert stock[("castor", None)] == 90
        assert stock[("headrest", None)] == 98
        assert len(json_store.orders.list_all()) == 1

    def test_rejected_order_leaves_stock_untouched(self, tmp_path, transactional):
        json_store = _stocked_store(tmp_path, transactional)
        before = _quantities(json_store)

        response = admit_orders_handler(json_store).respond(
            {"furnitureType": "chair", "quantity": 2, "backModel": "Y"}
        )

        assert response.status_code == 400
        assert response.body["message"] == "insufficient_back_model"
        assert _quantities(json_store) == before
        assert json_store.orders.list_all() == []

    def test_batch_outcome_by_topology(self, tmp_path, transactional):
        json_store = _stocked_store(tmp_path, transactional, castor=12)
        before = _quantities(json_store)

        response = admit_orders_handler(json_store).respond([
            {"furnitureType": "chair", "quantity": 2, "backModel": "X"},
            {"furnitureType": "chair", "quantity": 1, "backModel": "X"},
        ])

        assert response.status_code == 400
        assert response.body["details"]["orderIndex"] == 1
        stock = _quantities(json_store)
        if transactional:
            assert stock == before
            assert json_store.orders.list_all() == []
        else:
            assert stock[("castor", None)] == 2
            assert stock[("back", "X")] == 18
            assert len(json_store.orders.list_all()) == 1

    def test_cancel_restores_every_record(self, tmp_path, transactional):
        json_store = _stocked_store(tmp_path, transactional)
        before = _quantities(json_store)
        [order] = admit_orders_handler(json_store).respond(
            {"furnitureType": "chair", "quantity": 3, "backModel": "X"}
        ).body["orders"]

        CancelOrderHandler(json_store.orders, json_store.stock).handle(order["id"], actor="u-1", role="admin")

        assert _quantities(json_store) == before
