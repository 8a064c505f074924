# sales_dashboard/stores/memory_store.py
from __future__ import annotations

import itertools
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from sales_dashboard.core.filters import Predicate
from sales_dashboard.core.models import Transaction
from sales_dashboard.stores.base import BaseTransactionStore


class InMemoryTransactionStore(BaseTransactionStore):
    """Process-local store, used as the ``memory`` backend and in tests."""

    def __init__(self) -> None:
        self._rows: list[Transaction] = []
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, config: dict) -> "InMemoryTransactionStore":
        return cls()

    def replace_all(self, transactions: Iterable[Transaction]) -> int:
        self._rows = [replace(tx, id=str(next(self._ids))) for tx in transactions]
        return len(self._rows)

    def _filter_rows(self, predicate: Predicate) -> list[Transaction]:
        return [tx for tx in self._rows if predicate.matches(tx)]

    def count(self, predicate: Predicate) -> int:
        return len(self._filter_rows(predicate))

    def find(
        self, predicate: Predicate, skip: int = 0, limit: Optional[int] = None
    ) -> List[Transaction]:
        rows = self._filter_rows(predicate)[skip:]
        return rows if limit is None else rows[:limit]

    def sum_price(self, predicate: Predicate) -> float:
        return float(sum(tx.price for tx in self._filter_rows(predicate)))

    def count_by_category(self, predicate: Predicate) -> Dict[Optional[str], int]:
        counts: Dict[Optional[str], int] = {}
        for tx in self._filter_rows(predicate):
            counts[tx.category] = counts.get(tx.category, 0) + 1
        return counts
