"""Handler: an actor that can be pre-assigned to fulfil a new order."""

from __future__ import annotations

from dataclasses import dataclass

FACTORY_ROLE = "factory"


@dataclass(frozen=True)
class Handler:

    id: str
    name: str
    role: str
    status: str = "active"

    @property
    def is_active(self) -> bool:
        return self.status == "active"
