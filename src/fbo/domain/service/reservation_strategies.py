"""Execution strategies for admitting a batch of orders.

Both strategies hand each order, with a fresh ReservationTransaction, to an
``admit_one`` callback that reserves stock and persists the order.  They
differ only in what happens when an order fails:

- TransactionalStrategy runs the whole batch inside one store transaction;
  any failure aborts it and no stock or order anywhere is written.
- CompensatingStrategy relies on per-record conditional updates and undoes
  the failing order's own reservations.  Orders committed earlier in the
  batch stay committed.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

from fbo.domain.model.order import Order, OrderRequest
from fbo.domain.repository.stock_repository import StockRepository
from fbo.domain.repository.transaction_manager import TransactionManager
from fbo.domain.service.reservation_engine import ReservationTransaction

logger = logging.getLogger(__name__)

AdmitOne = Callable[[int, OrderRequest, ReservationTransaction], Order]


class ReservationStrategy(ABC):

    name = "abstract"

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    @abstractmethod
    def run(self, requests: list[OrderRequest], admit_one: AdmitOne) -> list[Order]:
        """Admit every request in order, returning the created orders."""


class TransactionalStrategy(ReservationStrategy):

    name = "transactional"

    def __init__(self, stock_repo: StockRepository, transactions: TransactionManager) -> None:
        super().__init__(stock_repo)
        self._transactions = transactions

    def run(self, requests: list[OrderRequest], admit_one: AdmitOne) -> list[Order]:
        created: list[Order] = []
        with self._transactions.transaction():
            for index, request in enumerate(requests):
                created.append(admit_one(index, request, ReservationTransaction(self._stock_repo)))
        return created


class CompensatingStrategy(ReservationStrategy):

    name = "compensating"

    def run(self, requests: list[OrderRequest], admit_one: AdmitOne) -> list[Order]:
        created: list[Order] = []
        for index, request in enumerate(requests):
            reservation = ReservationTransaction(self._stock_repo)
            try:
                created.append(admit_one(index, request, reservation))
            except Exception:
                reservation.rollback()
                if created:
                    logger.warning(
                        "order %d failed after %d earlier order(s) in the batch were admitted; "
                        "those stay admitted",
                        index, len(created),
                    )
                raise
        return created
