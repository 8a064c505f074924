# sales_dashboard/core/models.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone


def to_utc(value) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Accepts datetimes, dates and ISO 8601 strings. Naive values are taken
    as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class Transaction:
    title: str
    description: str
    price: float
    category: str | None
    date_of_sale: datetime
    sold: bool
    image: str | None = None
    id: str | None = None

    def __post_init__(self) -> None:
        self.price = float(self.price)
        self.date_of_sale = to_utc(self.date_of_sale)

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "image": self.image,
            "sold": self.sold,
            "dateOfSale": self.date_of_sale.isoformat(),
        }
