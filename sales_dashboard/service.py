# sales_dashboard/service.py
from __future__ import annotations

from typing import Dict, Optional

from sales_dashboard import analytics
from sales_dashboard.seed import HttpSeedSource, SeedSource
from sales_dashboard.stores import get_store
from sales_dashboard.stores.base import BaseTransactionStore


class TransactionQueryService:
    """The dashboard operations bound to one store and one seed source."""

    def __init__(self, store: BaseTransactionStore, seed_source: SeedSource) -> None:
        self.store = store
        self.seed_source = seed_source

    def initialize(self) -> Dict[str, str]:
        return analytics.initialize(self.store, self.seed_source)

    def list_transactions(
        self,
        month: Optional[int],
        page: int = analytics.DEFAULT_PAGE,
        per_page: int = analytics.DEFAULT_PER_PAGE,
        search: str = "",
    ) -> Dict[str, object]:
        return analytics.list_transactions(self.store, month, page, per_page, search)

    def statistics(self, month: Optional[int]) -> Dict[str, object]:
        return analytics.statistics(self.store, month)

    def bar_chart(self, month: Optional[int]) -> Dict[str, int]:
        return analytics.bar_chart(self.store, month)

    def pie_chart(self, month: Optional[int]) -> Dict[Optional[str], int]:
        return analytics.pie_chart(self.store, month)

    async def combined(self, month: Optional[int]) -> Dict[str, object]:
        return await analytics.combined(self.store, month)

    def close(self) -> None:
        self.store.close()


def build_service(config: dict, seed_source: SeedSource | None = None) -> TransactionQueryService:
    """Wire the configured store backend and seed source into a service."""
    source = seed_source or HttpSeedSource(
        url=config["seed_url"], timeout=config.get("seed_timeout")
    )
    return TransactionQueryService(store=get_store(config), seed_source=source)
