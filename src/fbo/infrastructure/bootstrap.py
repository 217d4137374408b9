"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from fbo.application.admit_orders import AdmitOrdersHandler
from fbo.infrastructure.config import Settings
from fbo.infrastructure.persistence.json_store import JsonStore


def settings() -> Settings:
    return Settings.from_env()


def store() -> JsonStore:
    current = settings()
    return JsonStore(current.data_dir, transactional=current.store_transactions)


def admit_orders_handler(json_store: JsonStore | None = None) -> AdmitOrdersHandler:
    json_store = json_store or store()
    return AdmitOrdersHandler(
        stock_repo=json_store.stock,
        order_repo=json_store.orders,
        handler_directory=json_store.handlers,
        transactions=json_store,
    )
