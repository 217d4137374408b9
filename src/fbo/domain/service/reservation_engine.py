"""Domain service: reserve every input a single order needs.

For one order the engine walks

    validating -> checking-components -> reserving-back-model
               -> reserving-components -> committed

and raises an AdmissionError from whichever stage fails.  Every decrement
it makes is a guarded conditional update and is recorded on the
ReservationTransaction passed in, so the caller can undo this order's
reservations when the surrounding store cannot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from fbo.domain.exceptions import AdmissionError, InsufficientComponentError
from fbo.domain.model.order import OrderRequest
from fbo.domain.model.stock import Reservation, StockQuery, StockRecord
from fbo.domain.model.value_objects import Quantity
from fbo.domain.repository.stock_repository import StockRepository
from fbo.domain.service.back_model_matcher import BackModelMatcher
from fbo.domain.service.component_requirements import compute_requirements

logger = logging.getLogger(__name__)


class ReservationStage(Enum):
    VALIDATING = "validating"
    CHECKING_COMPONENTS = "checking-components"
    RESERVING_BACK_MODEL = "reserving-back-model"
    RESERVING_COMPONENTS = "reserving-components"
    COMMITTED = "committed"
    FAILED = "failed"


class ReservationTransaction:
    """Compensation log for one order's reservations.

    Records each successful decrement and can restore all of them with
    ``rollback()``, whatever component type they were taken from.
    """

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo
        self._entries: list[Reservation] = []

    @property
    def entries(self) -> list[Reservation]:
        return list(self._entries)

    def record(self, record: StockRecord, amount: int) -> None:
        self._entries.append(Reservation(record.id, record.component_type, amount))

    def rollback(self) -> list[Reservation]:
        """Increment every recorded reservation back, newest first.

        A failed compensation leaves stock out of sync with orders; it is
        logged at CRITICAL and the remaining entries are still attempted.
        Returns the entries that could not be restored.
        """
        failed: list[Reservation] = []
        for entry in reversed(self._entries):
            try:
                restored = self._stock_repo.increment(entry.record_id, entry.amount)
            except Exception:
                logger.critical(
                    "compensation failed: stock record %s needs +%d %s restored by hand",
                    entry.record_id, entry.amount, entry.component_type,
                    exc_info=True,
                )
                failed.append(entry)
                continue
            if restored is None:
                logger.critical(
                    "compensation failed: stock record %s vanished before +%d %s was restored",
                    entry.record_id, entry.amount, entry.component_type,
                )
                failed.append(entry)
        self._entries.clear()
        return failed


@dataclass
class ReservationResult:
    quantity: int
    requirements: dict[str, int] = field(default_factory=dict)


class ReservationEngine:

    def __init__(self, stock_repo: StockRepository, shop: str | None = None) -> None:
        self._stock_repo = stock_repo
        self._shop = shop
        self._matcher = BackModelMatcher(stock_repo, shop=shop)

    def reserve(self, order: OrderRequest, reservation: ReservationTransaction) -> ReservationResult:
        """Reserve all components and the back model for *order*.

        On failure the reservations made so far remain recorded on
        *reservation*; undoing them is the caller's strategy decision.
        """
        stage = ReservationStage.VALIDATING
        try:
            quantity = Quantity.parse(order.quantity).value
            needed = compute_requirements(order.category, quantity, bool(order.headrest))
            result = ReservationResult(quantity=quantity, requirements=needed)

            stage = self._advance(stage, ReservationStage.CHECKING_COMPONENTS)
            for component, amount in needed.items():
                if amount > 0:
                    self._check_component(component, amount)

            stage = self._advance(stage, ReservationStage.RESERVING_BACK_MODEL)
            if order.back_model:
                record = self._matcher.reserve(order.back_model, order.furniture_type, quantity)
                reservation.record(record, quantity)

            stage = self._advance(stage, ReservationStage.RESERVING_COMPONENTS)
            for component, amount in needed.items():
                if amount > 0:
                    reservation.record(self._take_component(component, amount), amount)

            self._advance(stage, ReservationStage.COMMITTED)
            return result
        except AdmissionError as exc:
            logger.debug("reservation %s -> %s: %s", stage.value, ReservationStage.FAILED.value, exc.code)
            raise

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _advance(current: ReservationStage, nxt: ReservationStage) -> ReservationStage:
        logger.debug("reservation %s -> %s", current.value, nxt.value)
        return nxt

    def _component_query(self, component: str) -> StockQuery:
        return StockQuery(component_type=component, shop=self._shop)

    def _available(self, component: str) -> int:
        records = self._stock_repo.find(self._component_query(component))
        return max((r.quantity for r in records), default=0)

    def _check_component(self, component: str, amount: int) -> None:
        available = self._available(component)
        if available < amount:
            raise InsufficientComponentError(component, amount, available)

    def _take_component(self, component: str, amount: int) -> StockRecord:
        record = self._stock_repo.decrement_first(self._component_query(component), amount)
        if record is None:
            raise InsufficientComponentError(component, amount, self._available(component))
        return record
