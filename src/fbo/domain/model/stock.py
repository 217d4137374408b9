"""StockRecord aggregate: available quantity of one kind of physical input.

A record is keyed by component type, optional model, furniture type and
owning shop.  ``shop is None`` marks a factory-level (global) record.
A model-less "back" record is the generic back component; a "back" record
with a model is a finished back model.
Quantities are only ever changed through the guarded decrement/increment
operations of a StockRepository.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fbo.domain.exceptions import ValidationError

BACK = "back"
PRODUCT = "product"

# Component types whose records must name a model.
MODELLED_TYPES = frozenset({PRODUCT})

DEFAULT_FURNITURE_TYPE = "chair"
DEFAULT_LOW_STOCK = 10


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


@dataclass
class StockRecord:
    """Aggregate root for one stock line.

    Invariants:
    - ``quantity`` is never negative
    - ``model`` is set for product records
    """

    id: str
    component_type: str
    quantity: int = 0
    model: str | None = None
    furniture_type: str = DEFAULT_FURNITURE_TYPE
    shop: str | None = None
    low_stock: int = DEFAULT_LOW_STOCK

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValidationError(
                f"Stock quantity cannot be negative, got {self.quantity}"
            )
        if self.component_type in MODELLED_TYPES and not (self.model or "").strip():
            raise ValidationError(
                f"A model is required for '{self.component_type}' stock"
            )

    @property
    def is_global(self) -> bool:
        return self.shop is None

    @property
    def is_low(self) -> bool:
        return self.quantity <= self.low_stock

    def describe(self) -> dict[str, Any]:
        """Diagnostic view used in back-model failure details."""
        return {
            "id": self.id,
            "quantity": self.quantity,
            "furnitureType": self.furniture_type,
            "model": self.model,
        }


@dataclass(frozen=True)
class StockQuery:
    """Selects stock records by key.

    - ``model=None`` selects model-less (generic) records only; otherwise the
      model must match case-insensitively and exactly, never as a substring.
    - ``furniture_type=None`` accepts any furniture type.
    - ``shop=None`` selects factory-level records only.
    - ``min_quantity`` is the sufficiency guard used by conditional updates.
    """

    component_type: str
    model: str | None = None
    furniture_type: str | None = None
    shop: str | None = None
    min_quantity: int = 0

    def matches(self, record: StockRecord) -> bool:
        if record.component_type != self.component_type:
            return False
        if self.model is None:
            if _norm(record.model):
                return False
        elif _norm(record.model) != _norm(self.model):
            return False
        if self.furniture_type is not None and (
            _norm(record.furniture_type) != _norm(self.furniture_type)
        ):
            return False
        if record.shop != self.shop:
            return False
        return record.quantity >= self.min_quantity

    def requiring(self, quantity: int) -> StockQuery:
        return StockQuery(
            component_type=self.component_type,
            model=self.model,
            furniture_type=self.furniture_type,
            shop=self.shop,
            min_quantity=quantity,
        )


@dataclass(frozen=True)
class Reservation:
    """Units taken from one stock record on behalf of an order."""

    record_id: str
    component_type: str
    amount: int
