"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fbo.domain.exceptions import InvalidOrderError


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidOrderError(
                "quantity_required", received=self.value
            )
        if self.value <= 0:
            raise InvalidOrderError("quantity_required", received=self.value)

    def __str__(self) -> str:
        return str(self.value)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def parse(raw: Any) -> Quantity:
        """Coerce a wire value (int, integral float or numeric string)."""
        if raw is None or isinstance(raw, bool):
            raise InvalidOrderError("quantity_required", received=raw)
        if isinstance(raw, float):
            if not raw.is_integer():
                raise InvalidOrderError("quantity_not_integer", received=raw)
            raw = int(raw)
        elif isinstance(raw, str):
            text = raw.strip()
            try:
                raw = int(text)
            except ValueError:
                try:
                    number = float(text)
                except ValueError:
                    raise InvalidOrderError("quantity_required", received=raw) from None
                if not number.is_integer():
                    raise InvalidOrderError("quantity_not_integer", received=raw)
                raw = int(number)
        return Quantity(raw)
