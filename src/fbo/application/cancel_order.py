"""Application service: Cancel Order use case.

Returns the stock an order reserved at admission to the records it was
taken from, as listed in the order's ``reservations``.  Orders stored
without that list are released by re-deriving their needs from the
order's own fields: the component requirements plus the back model,
matched with the furniture-type preference used at admission.

Records are located first and incremented afterwards, so a missing record
is reported before any stock changes.
"""

from __future__ import annotations

import logging

from fbo.application.dto import OrderDTO
from fbo.domain.exceptions import EntityNotFoundError
from fbo.domain.model.order import Order
from fbo.domain.model.stock import Reservation, StockQuery
from fbo.domain.repository.order_repository import OrderRepository
from fbo.domain.repository.stock_repository import StockRepository
from fbo.domain.service.back_model_matcher import BackModelMatcher
from fbo.domain.service.component_requirements import compute_requirements

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        stock_repo: StockRepository,
    ) -> None:
        self._order_repo = order_repo
        self._stock_repo = stock_repo

    def handle(self, order_id: int, actor: str, role: str, note: str | None = None) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        order.ensure_cancellable()

        # Phase 1: locate every record to restore
        releases = self._locate_releases(order)

        # Phase 2: guarded increments
        for release in releases:
            if self._stock_repo.increment(release.record_id, release.amount) is None:
                raise EntityNotFoundError(
                    f"Stock record '{release.record_id}' disappeared while releasing order #{order_id}"
                )

        order.cancel(actor, role, note)
        self._order_repo.save(order)
        logger.info("order %s cancelled by %s, %d stock line(s) released", order.order_number, actor, len(releases))
        return OrderDTO.from_order(order)

    def _locate_releases(self, order: Order) -> list[Reservation]:
        if not order.reservations:
            return self._derive_releases(order)

        for reservation in order.reservations:
            if self._stock_repo.get_by_id(reservation.record_id) is None:
                raise EntityNotFoundError(
                    f"No stock record '{reservation.record_id}' for {reservation.component_type}"
                )
        return list(order.reservations)

    def _derive_releases(self, order: Order) -> list[Reservation]:
        releases: list[Reservation] = []

        if order.back_model:
            back = BackModelMatcher(self._stock_repo).locate(order.back_model, order.furniture_type)
            if back is None:
                raise EntityNotFoundError(f"No stock record for back model '{order.back_model}'")
            releases.append(Reservation(back.id, back.component_type, order.quantity))

        needed = compute_requirements(order.furniture_type or order.type, order.quantity, order.headrest)
        for component, amount in needed.items():
            if amount <= 0:
                continue
            record = self._stock_repo.find_one(StockQuery(component_type=component))
            if record is None:
                raise EntityNotFoundError(f"No stock record for component '{component}'")
            releases.append(Reservation(record.id, component, amount))

        return releases
