"""Abstract directory of actors that can be assigned to orders."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fbo.domain.model.handler import Handler


class HandlerDirectory(ABC):

    @abstractmethod
    def find_one(self, role: str) -> Handler | None:
        """Return one active handler with *role*, or None."""
