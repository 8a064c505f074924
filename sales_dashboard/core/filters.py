# sales_dashboard/core/filters.py
"""Typed filter predicates over transaction records.

A predicate can be evaluated against a :class:`Transaction` in memory, or
compiled into a SQLite ``WHERE`` fragment or a MongoDB filter document.
The SQL form expects the ``transactions`` table layout created by
:mod:`sales_dashboard.stores.sqlite_store`, including its ``sale_month``
column and the ``icontains`` SQL function.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from sales_dashboard.core.models import Transaction

_TEXT_FIELDS = ("title", "description")


class Predicate:
    def matches(self, tx: Transaction) -> bool:
        raise NotImplementedError

    def to_sql(self) -> tuple[str, list]:
        raise NotImplementedError

    def to_mongo(self) -> dict:
        raise NotImplementedError


@dataclass(frozen=True)
class MatchNothing(Predicate):
    def matches(self, tx: Transaction) -> bool:
        return False

    def to_sql(self) -> tuple[str, list]:
        return "0 = 1", []

    def to_mongo(self) -> dict:
        return {"_id": {"$in": []}}


@dataclass(frozen=True)
class MonthEquals(Predicate):
    month: int

    def matches(self, tx: Transaction) -> bool:
        return tx.date_of_sale.month == self.month

    def to_sql(self) -> tuple[str, list]:
        return "sale_month = ?", [self.month]

    def to_mongo(self) -> dict:
        return {"$expr": {"$eq": [{"$month": "$dateOfSale"}, self.month]}}


@dataclass(frozen=True)
class TextContains(Predicate):
    """Case-insensitive substring match on ``title`` or ``description``."""

    field: str
    needle: str

    def __post_init__(self) -> None:
        if self.field not in _TEXT_FIELDS:
            raise ValueError(f"Unsupported text field: {self.field}")

    def matches(self, tx: Transaction) -> bool:
        haystack = getattr(tx, self.field) or ""
        return self.needle.casefold() in haystack.casefold()

    def to_sql(self) -> tuple[str, list]:
        return f"icontains({self.field}, ?)", [self.needle]

    def to_mongo(self) -> dict:
        return {self.field: {"$regex": re.escape(self.needle), "$options": "i"}}


@dataclass(frozen=True)
class PriceEquals(Predicate):
    price: float

    def matches(self, tx: Transaction) -> bool:
        return tx.price == self.price

    def to_sql(self) -> tuple[str, list]:
        return "price = ?", [self.price]

    def to_mongo(self) -> dict:
        return {"price": self.price}


@dataclass(frozen=True)
class PriceRange(Predicate):
    """Price between ``low`` and ``high`` (inclusive); ``high=None`` is unbounded."""

    low: float
    high: float | None = None
    low_inclusive: bool = True

    def matches(self, tx: Transaction) -> bool:
        if self.low_inclusive:
            if tx.price < self.low:
                return False
        elif tx.price <= self.low:
            return False
        return self.high is None or tx.price <= self.high

    def to_sql(self) -> tuple[str, list]:
        clauses = ["price >= ?" if self.low_inclusive else "price > ?"]
        params: list = [self.low]
        if self.high is not None:
            clauses.append("price <= ?")
            params.append(self.high)
        return " AND ".join(clauses), params

    def to_mongo(self) -> dict:
        bounds = {"$gte" if self.low_inclusive else "$gt": self.low}
        if self.high is not None:
            bounds["$lte"] = self.high
        return {"price": bounds}


@dataclass(frozen=True)
class SoldEquals(Predicate):
    sold: bool

    def matches(self, tx: Transaction) -> bool:
        return bool(tx.sold) is self.sold

    def to_sql(self) -> tuple[str, list]:
        return "sold = ?", [int(self.sold)]

    def to_mongo(self) -> dict:
        return {"sold": self.sold}


@dataclass(frozen=True)
class And(Predicate):
    clauses: Tuple[Predicate, ...]

    def matches(self, tx: Transaction) -> bool:
        return all(clause.matches(tx) for clause in self.clauses)

    def to_sql(self) -> tuple[str, list]:
        return _join_sql(self.clauses, "AND")

    def to_mongo(self) -> dict:
        return {"$and": [clause.to_mongo() for clause in self.clauses]}


@dataclass(frozen=True)
class Or(Predicate):
    clauses: Tuple[Predicate, ...]

    def matches(self, tx: Transaction) -> bool:
        return any(clause.matches(tx) for clause in self.clauses)

    def to_sql(self) -> tuple[str, list]:
        return _join_sql(self.clauses, "OR")

    def to_mongo(self) -> dict:
        return {"$or": [clause.to_mongo() for clause in self.clauses]}


def _join_sql(clauses: Tuple[Predicate, ...], operator: str) -> tuple[str, list]:
    if not clauses:
        # empty AND is vacuously true, empty OR is false
        return ("1 = 1" if operator == "AND" else "0 = 1"), []
    parts: list[str] = []
    params: list = []
    for clause in clauses:
        sql, clause_params = clause.to_sql()
        parts.append(f"({sql})")
        params.extend(clause_params)
    return f" {operator} ".join(parts), params


def all_of(*clauses: Predicate | None) -> Predicate:
    """AND together the given predicates, skipping ``None`` entries."""
    present = tuple(clause for clause in clauses if clause is not None)
    if len(present) == 1:
        return present[0]
    return And(present)


def build_month_filter(month: int | None) -> Predicate:
    """Match records sold in ``month`` of any year.

    ``None`` is the sentinel for a missing or unparseable month; it and any
    month outside 1-12 match nothing.
    """
    if month is None or not 1 <= month <= 12:
        return MatchNothing()
    return MonthEquals(month)


def build_search_filter(search: str | None) -> Predicate | None:
    """Match ``search`` against title, description or exact price.

    Returns ``None`` for an empty search so callers can skip the clause.
    """
    if not search:
        return None
    price: Predicate
    try:
        price = PriceEquals(float(search))
    except ValueError:
        price = MatchNothing()
    return Or(
        (
            TextContains("title", search),
            TextContains("description", search),
            price,
        )
    )
