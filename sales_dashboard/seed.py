# sales_dashboard/seed.py
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol

from sales_dashboard.core.models import Transaction
from sales_dashboard.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"


class SeedSource(Protocol):
    """Anything that can produce the full seed dataset in one call."""

    def fetch(self) -> List[Transaction]:
        ...


def parse_seed_payload(data) -> List[Transaction]:
    """Convert the decoded seed JSON into Transaction objects.

    The payload must be a list of objects, each carrying a ``dateOfSale``.
    The source's own ``id`` field is dropped; stores assign identifiers.
    """
    if not isinstance(data, list):
        raise FetchError(f"Seed payload must be a JSON array, got {type(data).__name__}")

    txs = []
    for entry in data:
        if not isinstance(entry, dict):
            raise FetchError(f"Seed entry is not an object: {entry!r}")
        date_str = entry.get('dateOfSale')
        if not date_str:
            raise FetchError(f"Missing 'dateOfSale' in seed entry: {entry}")
        try:
            tx = Transaction(
                title=str(entry.get('title', '')),
                description=str(entry.get('description', '')),
                price=float(entry.get('price', 0.0)),
                category=entry.get('category'),
                image=entry.get('image'),
                sold=bool(entry.get('sold', False)),
                date_of_sale=date_str,
            )
        except (TypeError, ValueError) as exc:
            raise FetchError(f"Invalid seed entry {entry}: {exc}") from exc
        txs.append(tx)
    return txs


@dataclass
class HttpSeedSource:
    url: str = DEFAULT_SEED_URL
    timeout: float | None = None

    def fetch(self) -> List[Transaction]:
        logger.info("Fetching seed dataset from %s", self.url)
        req = urllib.request.Request(self.url, method="GET")
        req.add_header("Accept", "application/json")
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            with urllib.request.urlopen(req, **kwargs) as resp:
                raw = resp.read().decode("utf-8")
        except (urllib.error.URLError, OSError) as exc:
            raise FetchError(f"Could not fetch seed dataset from {self.url}: {exc}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise FetchError(f"Seed dataset at {self.url} is not valid JSON: {exc}") from exc
        return parse_seed_payload(data)


@dataclass
class FileSeedSource:
    """Seed dataset read from a local JSON file, for offline setups."""

    path: Path

    def fetch(self) -> List[Transaction]:
        logger.info("Reading seed dataset from %s", self.path)
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise FetchError(f"Could not read seed file {self.path}: {exc}") from exc
        return parse_seed_payload(data)
