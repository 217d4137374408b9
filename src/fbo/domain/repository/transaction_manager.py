"""Abstract multi-record transaction boundary over the stores.

Whether transactions exist at all depends on how the store is deployed
(replicated vs. standalone).  That is declared up front through
``StoreCapabilities`` rather than discovered from failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass


@dataclass(frozen=True)
class StoreCapabilities:
    transactions: bool = False


class TransactionManager(ABC):

    @abstractmethod
    def capabilities(self) -> StoreCapabilities:
        """Describe what the backing store supports."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Open a transaction spanning stock and order writes.

        Leaving the block normally commits; leaving it with an exception
        discards every write made inside it and re-raises.  Raises
        TransactionsUnsupportedError on entry, before any write, when the
        store cannot provide one.
        """
