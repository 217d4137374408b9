"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from fbo.domain.repository.stock_repository import StockRepository


@dataclass(frozen=True)
class StockLineDTO:
    id: str
    component_type: str
    model: str | None
    furniture_type: str
    shop: str | None
    quantity: int
    low: bool


class ShowStockHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(self, shop: str | None = None, all_scopes: bool = True) -> list[StockLineDTO]:
        records = self._stock_repo.list_all()
        if not all_scopes:
            if shop is None:
                records = [r for r in records if r.is_global]
            else:
                records = [r for r in records if r.shop == shop]
        return [
            StockLineDTO(
                id=r.id,
                component_type=r.component_type,
                model=r.model,
                furniture_type=r.furniture_type,
                shop=r.shop,
                quantity=r.quantity,
                low=r.is_low,
            )
            for r in records
        ]
