"""Shared file helpers for the JSON-backed repositories.

Each collection is a JSON array in its own file.  All collections of one
store share a StoreLock: a re-entrant thread lock plus an OS-level lock
file, so a read-modify-write on a file is atomic across threads *and*
processes, and a store transaction can hold every file at once.

Files are replaced atomically, so a reader never sees half-written JSON.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from filelock import FileLock


class StoreLock:
    """Re-entrant lock held across threads of this process and other processes."""

    def __init__(self, lock_path: Path) -> None:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(str(lock_path))

    def __enter__(self) -> StoreLock:
        self._thread_lock.acquire()
        try:
            self._file_lock.acquire()
        except BaseException:
            self._thread_lock.release()
            raise
        return self

    def __exit__(self, *exc_info) -> None:
        try:
            self._file_lock.release()
        finally:
            self._thread_lock.release()


def write_atomic(path: Path, text: str) -> None:
    """Write *text* to a sibling temp file, then rename it over *path*."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class JsonCollection:

    def __init__(self, file_path: Path, lock: StoreLock | None = None) -> None:
        self._file_path = file_path
        self._lock = lock or StoreLock(file_path.with_name(f"{file_path.name}.lock"))
        self._ensure_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        write_atomic(self._file_path, json.dumps(records, indent=2) + "\n")

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                write_atomic(self._file_path, "[]")
