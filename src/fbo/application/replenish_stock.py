"""Application service: Replenish Stock use case.

Adds units to the record keyed by (component type, model, furniture type,
shop), creating it on first replenishment.  Replenishing "back" without a
model stocks the generic back component; with a model it stocks that
finished back model.
"""

from __future__ import annotations

import logging

from fbo.domain.exceptions import ValidationError
from fbo.domain.model.stock import DEFAULT_FURNITURE_TYPE, StockQuery, StockRecord
from fbo.domain.repository.stock_repository import StockRepository, require_positive

logger = logging.getLogger(__name__)


class ReplenishStockHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(
        self,
        component_type: str,
        quantity: int,
        model: str | None = None,
        furniture_type: str = DEFAULT_FURNITURE_TYPE,
        shop: str | None = None,
    ) -> StockRecord:
        component_type = (component_type or "").strip().lower()
        if not component_type:
            raise ValidationError("Component type is required")
        require_positive(quantity)
        model = (model or "").strip() or None

        existing = self._stock_repo.find_one(
            StockQuery(
                component_type=component_type,
                model=model,
                furniture_type=furniture_type,
                shop=shop,
            )
        )
        if existing is not None:
            updated = self._stock_repo.increment(existing.id, quantity)
            if updated is not None:
                logger.info("stock %s +%d -> %d", updated.id, quantity, updated.quantity)
                return updated

        record = StockRecord(
            id=self._stock_repo.next_id(),
            component_type=component_type,
            quantity=quantity,
            model=model,
            furniture_type=furniture_type,
            shop=shop,
        )
        self._stock_repo.add(record)
        logger.info("stock %s created with %d %s", record.id, quantity, component_type)
        return record
