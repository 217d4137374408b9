"""Application service: Admit Orders use case.

Turns an order-creation payload into persisted Orders.  Every order is
admitted only after all of its stock has been reserved; a failing order
never leaves its own reservations behind.

The execution strategy follows the store's declared capabilities:

- transactional stores admit the batch atomically (all or nothing);
- standalone stores admit order by order with compensation, so orders
  admitted before a failing one stay admitted.

A transactional store that refuses to open a transaction falls back to
the compensating strategy for that batch.  The refusal happens before any
write, so the retry starts from a clean slate.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Callable

from fbo.application.dto import AdmissionResponse, OrderDTO
from fbo.application.payload import normalize_payload
from fbo.domain.exceptions import AdmissionError, TransactionsUnsupportedError
from fbo.domain.model.handler import FACTORY_ROLE
from fbo.domain.model.order import Order, OrderRequest
from fbo.domain.repository.handler_directory import HandlerDirectory
from fbo.domain.repository.order_repository import OrderRepository
from fbo.domain.repository.stock_repository import StockRepository
from fbo.domain.repository.transaction_manager import StoreCapabilities, TransactionManager
from fbo.domain.service.reservation_engine import ReservationEngine, ReservationTransaction
from fbo.domain.service.reservation_strategies import (
    CompensatingStrategy,
    ReservationStrategy,
    TransactionalStrategy,
)

logger = logging.getLogger(__name__)


def generate_order_number(created_at: datetime) -> str:
    """``ORD-<epoch ms>-<random hex>``: time-ordered and unique per call."""
    millis = int(created_at.timestamp() * 1000)
    return f"ORD-{millis}-{secrets.token_hex(3).upper()}"


class AdmitOrdersHandler:

    def __init__(
        self,
        stock_repo: StockRepository,
        order_repo: OrderRepository,
        handler_directory: HandlerDirectory,
        transactions: TransactionManager,
        capabilities: StoreCapabilities | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._stock_repo = stock_repo
        self._order_repo = order_repo
        self._handler_directory = handler_directory
        self._transactions = transactions
        # Decided once; never re-probed per request.
        self._capabilities = capabilities or transactions.capabilities()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._engine = ReservationEngine(stock_repo)

    @property
    def capabilities(self) -> StoreCapabilities:
        return self._capabilities

    def handle(self, payload: Any) -> list[OrderDTO]:
        """Admit every order in *payload*.

        Raises AdmissionError (with ``order_index`` set) for the first order
        that cannot be admitted.
        """
        requests = normalize_payload(payload)

        strategy = self._strategy()
        try:
            orders = strategy.run(requests, self._admit_one)
        except TransactionsUnsupportedError as exc:
            logger.warning("transactions unavailable (%s); retrying batch with compensation", exc)
            strategy = CompensatingStrategy(self._stock_repo)
            orders = strategy.run(requests, self._admit_one)

        logger.info("admitted %d order(s) using %s strategy", len(orders), strategy.name)
        return [OrderDTO.from_order(order) for order in orders]

    def respond(self, payload: Any) -> AdmissionResponse:
        """Run ``handle`` and render the outcome as a response envelope."""
        try:
            dtos = self.handle(payload)
        except AdmissionError as exc:
            return AdmissionResponse(
                status_code=400,
                body={"success": False, "message": exc.code, "details": exc.to_details()},
            )
        except Exception:
            logger.exception("order admission failed unexpectedly")
            return AdmissionResponse(
                status_code=500,
                body={"success": False, "message": "server_error"},
            )
        return AdmissionResponse(
            status_code=200,
            body={"success": True, "orders": [dto.as_payload() for dto in dtos]},
        )

    # --- Internal helpers -----------------------------------------------------

    def _strategy(self) -> ReservationStrategy:
        if self._capabilities.transactions:
            return TransactionalStrategy(self._stock_repo, self._transactions)
        return CompensatingStrategy(self._stock_repo)

    def _admit_one(
        self,
        index: int,
        request: OrderRequest,
        reservation: ReservationTransaction,
    ) -> Order:
        try:
            result = self._engine.reserve(request, reservation)
        except AdmissionError as exc:
            exc.order_index = index
            logger.warning("order %d rejected: %s", index, exc.code)
            raise

        created_at = self._clock()
        assigned_factory = request.assigned_factory
        if not assigned_factory:
            handler = self._handler_directory.find_one(FACTORY_ROLE)
            if handler is not None:
                assigned_factory = handler.id

        order = Order.create(
            request,
            quantity=result.quantity,
            order_number=request.order_number or generate_order_number(created_at),
            assigned_factory=assigned_factory,
            created_at=created_at,
            reservations=reservation.entries,
        )
        self._order_repo.save(order)
        return order
