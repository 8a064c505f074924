# sales_dashboard/stores/base.py
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from sales_dashboard.core.filters import Predicate
from sales_dashboard.core.models import Transaction


class BaseTransactionStore(ABC):
    @abstractmethod
    def replace_all(self, transactions: Iterable[Transaction]) -> int:
        """
        Delete every stored record, then insert ``transactions``.
        Returns the number of records inserted.
        """

    @abstractmethod
    def count(self, predicate: Predicate) -> int:
        pass

    @abstractmethod
    def find(
        self, predicate: Predicate, skip: int = 0, limit: Optional[int] = None
    ) -> List[Transaction]:
        """
        Return matching records in insertion order, skipping ``skip`` and
        returning at most ``limit`` (no limit when None).
        """

    @abstractmethod
    def sum_price(self, predicate: Predicate) -> float:
        pass

    @abstractmethod
    def count_by_category(self, predicate: Predicate) -> Dict[Optional[str], int]:
        """
        Count matching records per category, ordered by first appearance.
        """

    def close(self) -> None:
        pass
