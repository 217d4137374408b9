"""Concurrent admissions must never oversell a component."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from fbo.application.admit_orders import AdmitOrdersHandler
from fbo.domain.exceptions import InsufficientComponentError
from tests.fakes import (
    FakeHandlerDirectory,
    FakeOrderRepository,
    FakeStockRepository,
    FakeTransactionManager,
    component_records,
)

ORDERS = 8
SEATS = 3


@pytest.mark.parametrize("transactional", [True, False])
def test_scarce_component_is_never_oversold(transactional):
    stock = FakeStockRepository(component_records(100, seat=SEATS))
    orders = FakeOrderRepository()
    handler = AdmitOrdersHandler(
        stock,
        orders,
        FakeHandlerDirectory(),
        FakeTransactionManager(stock, orders, transactional=transactional),
    )

    def admit(_):
        try:
            handler.handle({"furnitureType": "chair", "quantity": 1})
        except InsufficientComponentError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=ORDERS) as pool:
        outcomes = list(pool.map(admit, range(ORDERS)))

    assert outcomes.count(True) == SEATS
    assert len(orders.list_all()) == SEATS
    assert stock.quantity("seat") == 0
    assert stock.quantity("back") == 100 - SEATS
    assert stock.quantity("arm") == 100 - 2 * SEATS
    assert stock.quantity("castor") == 100 - 5 * SEATS
    assert stock.quantity("headrest") == 100
