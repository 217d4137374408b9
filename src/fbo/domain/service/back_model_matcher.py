"""Domain service: resolve a back-model name to a finished-part record.

Matching is case-insensitive and exact.  A record tagged with the order's
furniture type is preferred; any furniture type is accepted as a fallback.
Both passes require enough quantity, so a well-stocked record of another
type never wins over a sufficient record of the right type.
"""

from __future__ import annotations

from fbo.domain.exceptions import InsufficientBackModelError
from fbo.domain.model.stock import BACK, StockQuery, StockRecord
from fbo.domain.repository.stock_repository import StockRepository


class BackModelMatcher:

    def __init__(
        self,
        stock_repo: StockRepository,
        component_type: str = BACK,
        shop: str | None = None,
    ) -> None:
        self._stock_repo = stock_repo
        self._component_type = component_type
        self._shop = shop

    def resolve(self, model: str, furniture_type: str | None, required: int) -> StockRecord:
        """Return the preferred record with at least *required* units.

        Read-only.  Raises InsufficientBackModelError with diagnostics.
        """
        for query in self._preference(model, furniture_type, required):
            record = self._stock_repo.find_one(query)
            if record is not None:
                return record
        raise self._not_found(model, furniture_type, required)

    def reserve(self, model: str, furniture_type: str | None, quantity: int) -> StockRecord:
        """Atomically take *quantity* units from the preferred record."""
        for query in self._preference(model, furniture_type, quantity):
            record = self._stock_repo.decrement_first(query, quantity)
            if record is not None:
                return record
        raise self._not_found(model, furniture_type, quantity)

    def locate(self, model: str, furniture_type: str | None) -> StockRecord | None:
        """Preferred record for *model* regardless of quantity."""
        for query in self._preference(model, furniture_type, 0):
            record = self._stock_repo.find_one(query)
            if record is not None:
                return record
        return None

    # --- Internal helpers -----------------------------------------------------

    def _query(self, model: str, furniture_type: str | None, required: int) -> StockQuery:
        return StockQuery(
            component_type=self._component_type,
            model=model,
            furniture_type=furniture_type,
            shop=self._shop,
            min_quantity=required,
        )

    def _preference(
        self, model: str, furniture_type: str | None, required: int
    ) -> list[StockQuery]:
        queries = []
        if furniture_type:
            queries.append(self._query(model, furniture_type, required))
        queries.append(self._query(model, None, required))
        return queries

    def _not_found(
        self, model: str, furniture_type: str | None, required: int
    ) -> InsufficientBackModelError:
        with_type = self._stock_repo.find(self._query(model, furniture_type, 0))
        any_type = self._stock_repo.find(self._query(model, None, 0))
        return InsufficientBackModelError(
            model=model,
            requested=required,
            matches_with_furniture_type=[r.describe() for r in with_type],
            matches_any_furniture_type=[r.describe() for r in any_type],
        )
