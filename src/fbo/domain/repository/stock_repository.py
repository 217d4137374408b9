"""Abstract repository for StockRecord aggregate.

Quantities may only change through ``decrement_first`` and ``increment``,
which implementations must perform as single atomic conditional updates.
Reading a record and saving it back with a new quantity is never a valid
way to reserve stock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from fbo.domain.exceptions import ValidationError
from fbo.domain.model.stock import StockQuery, StockRecord


def require_positive(amount: int) -> None:
    """Guard shared by every quantity-changing implementation."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(f"Stock adjustment must be a positive integer, got {amount!r}")


def next_record_id(existing_ids: Iterable[str]) -> str:
    """One past the highest numeric ID.

    Non-numeric IDs, such as keys imported from another store, are ignored.
    """
    numbers = [int(i) for i in map(str, existing_ids) if i.isdigit()]
    return str(max(numbers, default=0) + 1)


class StockRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique stock record ID."""

    @abstractmethod
    def get_by_id(self, record_id: str) -> StockRecord | None:
        """Return a stock record by its ID, or None."""

    @abstractmethod
    def find(self, query: StockQuery) -> list[StockRecord]:
        """Return every record matching *query*, in storage order."""

    @abstractmethod
    def list_all(self) -> list[StockRecord]:
        """Return every stock record."""

    @abstractmethod
    def add(self, record: StockRecord) -> None:
        """Persist a brand-new record.  Never used to change a quantity."""

    @abstractmethod
    def decrement_first(self, query: StockQuery, amount: int) -> StockRecord | None:
        """Atomically take *amount* from the first record matching *query*
        whose quantity is at least *amount*.

        Returns the updated record, or None when no record qualified.
        """

    @abstractmethod
    def increment(self, record_id: str, amount: int) -> StockRecord | None:
        """Atomically add *amount* to a record.  Returns None if it is gone."""

    def find_one(self, query: StockQuery) -> StockRecord | None:
        matches = self.find(query)
        return matches[0] if matches else None
