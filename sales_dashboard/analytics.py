# sales_dashboard/analytics.py
"""Month-filtered queries over a transaction store.

Every function here takes the store explicitly and returns plain JSON-ready
data, so the HTTP handlers, the CLI and :func:`combined` share one code path.
A ``month`` of None is the sentinel for unparseable input and yields empty
results.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import anyio
import anyio.to_thread

from sales_dashboard.core.filters import (
    Predicate,
    PriceRange,
    SoldEquals,
    all_of,
    build_month_filter,
    build_search_filter,
)
from sales_dashboard.errors import InitializationError, SalesDashboardError
from sales_dashboard.seed import SeedSource
from sales_dashboard.stores.base import BaseTransactionStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10

# largest skip/limit SQLite and BSON can bind (signed 64-bit)
MAX_STORE_INT = 2**63 - 1

# (min, max) label bounds; None is the open upper end
PRICE_BUCKETS: List[Tuple[int, Optional[int]]] = [
    (0, 100),
    (101, 200),
    (201, 300),
    (301, 400),
    (401, 500),
    (501, 600),
    (601, 700),
    (701, 800),
    (801, 900),
    (901, None),
]


def bucket_label(minimum: int, maximum: Optional[int]) -> str:
    return f"{minimum}-{'above' if maximum is None else maximum}"


def bucket_predicates() -> List[Tuple[str, Predicate]]:
    """Return ``(label, predicate)`` per price bucket, in bucket order.

    Each bucket after the first starts just above the previous maximum, so
    fractional prices such as 100.5 land in exactly one bucket.
    """
    buckets: List[Tuple[str, Predicate]] = []
    previous_max: Optional[int] = None
    for minimum, maximum in PRICE_BUCKETS:
        if previous_max is None:
            predicate = PriceRange(minimum, maximum)
        else:
            predicate = PriceRange(previous_max, maximum, low_inclusive=False)
        buckets.append((bucket_label(minimum, maximum), predicate))
        previous_max = maximum
    return buckets


def list_transactions(
    store: BaseTransactionStore,
    month: Optional[int],
    page: int = DEFAULT_PAGE,
    per_page: int = DEFAULT_PER_PAGE,
    search: str = "",
) -> Dict[str, object]:
    """One page of the month's transactions, optionally narrowed by ``search``."""
    predicate = all_of(build_month_filter(month), build_search_filter(search))
    limit = min(max(per_page, 0), MAX_STORE_INT)
    skip = min(max(page - 1, 0) * limit, MAX_STORE_INT)
    total = store.count(predicate)
    rows = store.find(predicate, skip=skip, limit=limit)
    return {
        "page": page,
        "per_page": per_page,
        "total": total,
        "transactions": [tx.to_json() for tx in rows],
    }


def _as_number(total: float) -> float | int:
    """Whole totals as ints, so an empty month reports 0 rather than 0.0."""
    return int(total) if float(total).is_integer() else total


def statistics(store: BaseTransactionStore, month: Optional[int]) -> Dict[str, object]:
    month_filter = build_month_filter(month)
    sold = all_of(month_filter, SoldEquals(True))
    return {
        "total_sales": _as_number(store.sum_price(sold)),
        "sold_items": store.count(sold),
        "not_sold_items": store.count(all_of(month_filter, SoldEquals(False))),
    }


def bar_chart(store: BaseTransactionStore, month: Optional[int]) -> Dict[str, int]:
    month_filter = build_month_filter(month)
    return {
        label: store.count(all_of(month_filter, predicate))
        for label, predicate in bucket_predicates()
    }


def pie_chart(store: BaseTransactionStore, month: Optional[int]) -> Dict[Optional[str], int]:
    return store.count_by_category(build_month_filter(month))


async def combined(store: BaseTransactionStore, month: Optional[int]) -> Dict[str, object]:
    """Run the four month queries concurrently and bundle their results.

    If any of them raises, the task group cancels the rest and the error
    propagates; there is no partial result.
    """
    results: Dict[str, object] = {}

    async def run(key, func):
        results[key] = await anyio.to_thread.run_sync(func, store, month)

    async with anyio.create_task_group() as tg:
        tg.start_soon(run, "transactions", list_transactions)
        tg.start_soon(run, "statistics", statistics)
        tg.start_soon(run, "bar_chart", bar_chart)
        tg.start_soon(run, "pie_chart", pie_chart)

    return {
        "transactions": results["transactions"],
        "statistics": results["statistics"],
        "bar_chart": results["bar_chart"],
        "pie_chart": results["pie_chart"],
    }


def initialize(store: BaseTransactionStore, source: SeedSource) -> Dict[str, str]:
    """Replace the store contents with the seed dataset."""
    try:
        txs = source.fetch()
        logger.info("Fetched %d seed transaction(s)", len(txs))
        inserted = store.replace_all(txs)
    except SalesDashboardError as exc:
        raise InitializationError(f"Failed to initialize database: {exc}") from exc
    logger.info("Stored %d transaction(s)", inserted)
    return {"message": "Database initialized successfully."}
