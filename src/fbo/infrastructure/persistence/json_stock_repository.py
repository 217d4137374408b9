"""JSON-file-backed implementation of StockRepository."""

from __future__ import annotations

from fbo.domain.exceptions import ValidationError
from fbo.domain.model.stock import DEFAULT_FURNITURE_TYPE, DEFAULT_LOW_STOCK, StockQuery, StockRecord
from fbo.domain.repository.stock_repository import StockRepository, next_record_id, require_positive
from fbo.infrastructure.persistence.json_file import JsonCollection


class JsonStockRepository(JsonCollection, StockRepository):

    # --- StockRepository interface --------------------------------------------

    def next_id(self) -> str:
        with self._lock:
            records = self._load_raw()
        return next_record_id(raw["id"] for raw in records)

    def get_by_id(self, record_id: str) -> StockRecord | None:
        for raw in self._load_locked():
            if str(raw["id"]) == record_id:
                return self._to_domain(raw)
        return None

    def find(self, query: StockQuery) -> list[StockRecord]:
        records = [self._to_domain(raw) for raw in self._load_locked()]
        return [r for r in records if query.matches(r)]

    def list_all(self) -> list[StockRecord]:
        return [self._to_domain(raw) for raw in self._load_locked()]

    def add(self, record: StockRecord) -> None:
        with self._lock:
            records = self._load_raw()
            if any(str(raw["id"]) == record.id for raw in records):
                raise ValidationError(f"Stock record '{record.id}' already exists")
            records.append(self._to_raw(record))
            self._persist_raw(records)

    def decrement_first(self, query: StockQuery, amount: int) -> StockRecord | None:
        require_positive(amount)
        guard = query.requiring(max(amount, query.min_quantity))
        with self._lock:
            records = self._load_raw()
            for raw in records:
                if guard.matches(self._to_domain(raw)):
                    raw["quantity"] -= amount
                    self._persist_raw(records)
                    return self._to_domain(raw)
        return None

    def increment(self, record_id: str, amount: int) -> StockRecord | None:
        require_positive(amount)
        with self._lock:
            records = self._load_raw()
            for raw in records:
                if str(raw["id"]) == record_id:
                    raw["quantity"] += amount
                    self._persist_raw(records)
                    return self._to_domain(raw)
        return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: StockRecord) -> dict:
        return {
            "id": record.id,
            "type": record.component_type,
            "model": record.model,
            "furnitureType": record.furniture_type,
            "shop": record.shop,
            "quantity": record.quantity,
            "lowStock": record.low_stock,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockRecord:
        return StockRecord(
            id=str(raw["id"]),
            component_type=raw["type"],
            quantity=raw.get("quantity", 0),
            model=raw.get("model"),
            furniture_type=raw.get("furnitureType") or DEFAULT_FURNITURE_TYPE,
            shop=raw.get("shop"),
            low_stock=raw.get("lowStock", DEFAULT_LOW_STOCK),
        )

    def _load_locked(self) -> list[dict]:
        with self._lock:
            return self._load_raw()
