"""Runtime settings read from the environment.

``FBO_STORE_TRANSACTIONS`` declares the store topology: a replicated
deployment supports multi-record transactions, a standalone one does not.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_TRUTHY = {"1", "true", "yes", "on", "replicated"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    store_transactions: bool = False
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> Settings:
        data_dir = os.environ.get("FBO_DATA_DIR")
        return Settings(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            store_transactions=os.environ.get("FBO_STORE_TRANSACTIONS", "").strip().lower() in _TRUTHY,
            log_level=os.environ.get("FBO_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
