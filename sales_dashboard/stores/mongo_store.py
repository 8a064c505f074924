# sales_dashboard/stores/mongo_store.py
"""MongoDB-backed transaction store."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from sales_dashboard.core.filters import Predicate
from sales_dashboard.core.models import Transaction
from sales_dashboard.errors import StoreError
from sales_dashboard.stores.base import BaseTransactionStore

logger = logging.getLogger(__name__)


def _to_document(tx: Transaction) -> dict:
    return {
        "title": tx.title,
        "description": tx.description,
        "price": float(tx.price),
        "category": tx.category,
        "image": tx.image,
        "sold": bool(tx.sold),
        "dateOfSale": tx.date_of_sale,
    }


def _from_document(doc: dict) -> Transaction:
    return Transaction(
        id=str(doc["_id"]),
        title=doc.get("title", ""),
        description=doc.get("description", ""),
        price=float(doc.get("price", 0.0)),
        category=doc.get("category"),
        image=doc.get("image"),
        sold=bool(doc.get("sold", False)),
        date_of_sale=doc["dateOfSale"],
    )


@contextmanager
def _wrap_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        raise StoreError(f"MongoDB {operation} failed: {exc}") from exc


class MongoTransactionStore(BaseTransactionStore):
    def __init__(self, collection, client: MongoClient | None = None) -> None:
        self.collection = collection
        self._client = client

    @classmethod
    def from_config(cls, config: dict) -> "MongoTransactionStore":
        store_cfg = config["store"]
        client = MongoClient(store_cfg["mongo_uri"])
        collection = client[store_cfg["mongo_database"]][store_cfg["mongo_collection"]]
        return cls(collection, client=client)

    def replace_all(self, transactions: Iterable[Transaction]) -> int:
        documents = [_to_document(tx) for tx in transactions]
        with _wrap_errors("reseed"):
            self.collection.delete_many({})
            if documents:
                self.collection.insert_many(documents, ordered=True)
        return len(documents)

    def count(self, predicate: Predicate) -> int:
        query = predicate.to_mongo()
        logger.debug("mongo count filter=%s", query)
        with _wrap_errors("count"):
            return int(self.collection.count_documents(query))

    def find(
        self, predicate: Predicate, skip: int = 0, limit: Optional[int] = None
    ) -> List[Transaction]:
        # limit(0) means "no limit" to MongoDB
        if limit == 0:
            return []
        query = predicate.to_mongo()
        logger.debug("mongo find filter=%s skip=%s limit=%s", query, skip, limit)
        with _wrap_errors("find"):
            cursor = self.collection.find(query).sort("_id", ASCENDING).skip(skip)
            if limit is not None:
                cursor = cursor.limit(limit)
            return [_from_document(doc) for doc in cursor]

    def sum_price(self, predicate: Predicate) -> float:
        pipeline = [
            {"$match": predicate.to_mongo()},
            {"$group": {"_id": None, "total": {"$sum": "$price"}}},
        ]
        with _wrap_errors("aggregate"):
            rows = list(self.collection.aggregate(pipeline))
        return float(rows[0]["total"]) if rows else 0.0

    def count_by_category(self, predicate: Predicate) -> Dict[Optional[str], int]:
        pipeline = [
            {"$match": predicate.to_mongo()},
            {
                "$group": {
                    "_id": "$category",
                    "count": {"$sum": 1},
                    "first": {"$min": "$_id"},
                }
            },
            {"$sort": {"first": ASCENDING}},
        ]
        with _wrap_errors("aggregate"):
            rows = list(self.collection.aggregate(pipeline))
        return {row["_id"]: int(row["count"]) for row in rows}

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
