"""JSON-file-backed implementation of HandlerDirectory (read-only)."""

from __future__ import annotations

from fbo.domain.model.handler import Handler
from fbo.domain.repository.handler_directory import HandlerDirectory
from fbo.infrastructure.persistence.json_file import JsonCollection


class JsonHandlerDirectory(JsonCollection, HandlerDirectory):

    def find_one(self, role: str) -> Handler | None:
        with self._lock:
            records = self._load_raw()
        for raw in records:
            handler = Handler(
                id=str(raw["id"]),
                name=raw.get("name", ""),
                role=raw.get("role", ""),
                status=raw.get("status", "active"),
            )
            if handler.role == role and handler.is_active:
                return handler
        return None
