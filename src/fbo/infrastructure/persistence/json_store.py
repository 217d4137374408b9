"""JSON-file store: the repositories plus a TransactionManager over them.

A transactional store holds the shared store lock for the whole
transaction, so other threads and processes wait for it.  It snapshots
every collection on entry and writes the snapshots back if the block
raises.  A standalone store refuses to open a transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fbo.domain.exceptions import TransactionsUnsupportedError
from fbo.domain.repository.transaction_manager import StoreCapabilities, TransactionManager
from fbo.infrastructure.persistence.json_file import StoreLock, write_atomic
from fbo.infrastructure.persistence.json_handler_directory import JsonHandlerDirectory
from fbo.infrastructure.persistence.json_order_repository import JsonOrderRepository
from fbo.infrastructure.persistence.json_stock_repository import JsonStockRepository

logger = logging.getLogger(__name__)


class JsonStore(TransactionManager):

    def __init__(self, data_dir: Path, transactional: bool = False) -> None:
        self._transactional = transactional
        self._lock = StoreLock(data_dir / ".fbo.lock")
        self.stock = JsonStockRepository(data_dir / "stock.json", self._lock)
        self.orders = JsonOrderRepository(data_dir / "orders.json", self._lock)
        self.handlers = JsonHandlerDirectory(data_dir / "handlers.json", self._lock)

    def capabilities(self) -> StoreCapabilities:
        return StoreCapabilities(transactions=self._transactional)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if not self._transactional:
            raise TransactionsUnsupportedError(
                "standalone store: multi-record transactions need a replicated deployment"
            )
        with self._lock:
            files = [self.stock.file_path, self.orders.file_path]
            snapshot = {path: path.read_text(encoding="utf-8") for path in files}
            try:
                yield
            except BaseException:
                for path, content in snapshot.items():
                    write_atomic(path, content)
                logger.info("transaction aborted; %d collection(s) restored", len(snapshot))
                raise
