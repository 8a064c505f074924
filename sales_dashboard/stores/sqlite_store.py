# sales_dashboard/stores/sqlite_store.py
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from sales_dashboard.core.filters import Predicate
from sales_dashboard.core.models import Transaction
from sales_dashboard.errors import StoreError
from sales_dashboard.stores.base import BaseTransactionStore

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, description, price, category, image, sold, date_of_sale"


def _icontains(haystack: str | None, needle: str | None) -> int:
    if haystack is None or needle is None:
        return 0
    return int(needle.casefold() in haystack.casefold())


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            price REAL NOT NULL,
            category TEXT,
            image TEXT,
            sold INTEGER NOT NULL,
            date_of_sale TEXT NOT NULL,
            sale_month INTEGER NOT NULL
        )
        """
    )
    conn.commit()


def _row_to_transaction(row: tuple) -> Transaction:
    return Transaction(
        id=str(row[0]),
        title=row[1],
        description=row[2],
        price=float(row[3]),
        category=row[4],
        image=row[5],
        sold=bool(row[6]),
        date_of_sale=row[7],
    )


class SqliteTransactionStore(BaseTransactionStore):
    """Transactions persisted in a SQLite database file.

    A connection is opened per call, so one instance can be shared across
    worker threads.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)

    @classmethod
    def from_config(cls, config: dict) -> "SqliteTransactionStore":
        return cls(config["store"]["sqlite_path"])

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"Could not open database {self.db_path}: {exc}") from exc
        try:
            conn.create_function("icontains", 2, _icontains, deterministic=True)
            _init_db(conn)
            yield conn
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite operation failed: {exc}") from exc
        finally:
            conn.close()

    def _select(self, conn, sql: str, predicate: Predicate, extra: list | None = None):
        where, params = predicate.to_sql()
        query = sql.format(where=where)
        logger.debug("sqlite query=%s params=%s", " ".join(query.split()), params)
        return conn.execute(query, params + (extra or []))

    def replace_all(self, transactions: Iterable[Transaction]) -> int:
        rows = [
            (
                tx.title,
                tx.description,
                float(tx.price),
                tx.category,
                tx.image,
                int(bool(tx.sold)),
                tx.date_of_sale.isoformat(),
                tx.date_of_sale.month,
            )
            for tx in transactions
        ]
        with self._connect() as conn:
            conn.execute("DELETE FROM transactions")
            conn.executemany(
                """
                INSERT INTO transactions
                (title, description, price, category, image, sold, date_of_sale, sale_month)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
            conn.commit()
        return len(rows)

    def count(self, predicate: Predicate) -> int:
        with self._connect() as conn:
            row = self._select(
                conn, "SELECT COUNT(*) FROM transactions WHERE {where}", predicate
            ).fetchone()
        return int(row[0])

    def find(
        self, predicate: Predicate, skip: int = 0, limit: Optional[int] = None
    ) -> List[Transaction]:
        with self._connect() as conn:
            rows = self._select(
                conn,
                f"SELECT {_COLUMNS} FROM transactions WHERE {{where}} "
                "ORDER BY id LIMIT ? OFFSET ?",
                predicate,
                [-1 if limit is None else limit, skip],
            ).fetchall()
        return [_row_to_transaction(row) for row in rows]

    def sum_price(self, predicate: Predicate) -> float:
        with self._connect() as conn:
            row = self._select(
                conn,
                "SELECT COALESCE(SUM(price), 0.0) FROM transactions WHERE {where}",
                predicate,
            ).fetchone()
        return float(row[0] or 0.0)

    def count_by_category(self, predicate: Predicate) -> Dict[Optional[str], int]:
        with self._connect() as conn:
            rows = self._select(
                conn,
                """
                SELECT category, COUNT(*) AS count
                FROM transactions
                WHERE {where}
                GROUP BY category
                ORDER BY MIN(id)
                """,
                predicate,
            ).fetchall()
        return {row[0]: int(row[1]) for row in rows}
