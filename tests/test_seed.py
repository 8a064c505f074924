import io
import json
import urllib.error
from datetime import datetime, timezone

import pytest

from sales_dashboard.errors import FetchError
from sales_dashboard.seed import FileSeedSource, HttpSeedSource, parse_seed_payload

SAMPLE = [
    {
        "id": 1,
        "title": "Fjallraven Backpack",
        "price": 329.85,
        "description": "Your perfect pack",
        "category": "men's clothing",
        "image": "https://example.com/1.jpg",
        "sold": False,
        "dateOfSale": "2021-11-27T20:29:54+05:30",
    },
    {
        "id": 2,
        "title": "Mens Cotton Jacket",
        "price": 2234.88,
        "description": "Great outerwear",
        "category": "men's clothing",
        "sold": True,
        "dateOfSale": "2022-06-27T20:29:54+05:30",
    },
]


def test_parse_seed_payload():
    txs = parse_seed_payload(SAMPLE)

    assert len(txs) == 2
    first = txs[0]
    assert first.title == "Fjallraven Backpack"
    assert first.price == 329.85
    assert first.sold is False
    assert first.image == "https://example.com/1.jpg"
    assert first.date_of_sale == datetime(2021, 11, 27, 14, 59, 54, tzinfo=timezone.utc)
    # identifiers come from the store, not the seed
    assert first.id is None
    assert txs[1].image is None


@pytest.mark.parametrize(
    "payload",
    [
        {"not": "a list"},
        ["not an object"],
        [{"title": "no date", "price": 1}],
        [{"title": "bad price", "price": "cheap", "dateOfSale": "2021-01-01"}],
        [{"title": "bad date", "price": 1, "dateOfSale": "yesterday"}],
    ],
)
def test_parse_seed_payload_rejects_invalid_entries(payload):
    with pytest.raises(FetchError):
        parse_seed_payload(payload)


def test_http_seed_source_fetches_json(monkeypatch):
    calls = {}

    def fake_urlopen(req, **kwargs):
        calls["url"] = req.full_url
        calls["kwargs"] = kwargs
        return io.BytesIO(json.dumps(SAMPLE).encode("utf-8"))

    monkeypatch.setattr("sales_dashboard.seed.urllib.request.urlopen", fake_urlopen)

    txs = HttpSeedSource(url="https://seed.example/data.json", timeout=5).fetch()

    assert [tx.title for tx in txs] == ["Fjallraven Backpack", "Mens Cotton Jacket"]
    assert calls["url"] == "https://seed.example/data.json"
    assert calls["kwargs"] == {"timeout": 5}


def test_http_seed_source_without_timeout(monkeypatch):
    calls = {}

    def fake_urlopen(req, **kwargs):
        calls["kwargs"] = kwargs
        return io.BytesIO(b"[]")

    monkeypatch.setattr("sales_dashboard.seed.urllib.request.urlopen", fake_urlopen)

    assert HttpSeedSource(url="https://seed.example/data.json").fetch() == []
    assert calls["kwargs"] == {}


def test_http_seed_source_network_error(monkeypatch):
    def fake_urlopen(req, **kwargs):
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr("sales_dashboard.seed.urllib.request.urlopen", fake_urlopen)

    with pytest.raises(FetchError):
        HttpSeedSource(url="https://seed.example/data.json").fetch()


def test_http_seed_source_invalid_json(monkeypatch):
    monkeypatch.setattr(
        "sales_dashboard.seed.urllib.request.urlopen",
        lambda req, **kwargs: io.BytesIO(b"<html>not json</html>"),
    )

    with pytest.raises(FetchError):
        HttpSeedSource(url="https://seed.example/data.json").fetch()


def test_file_seed_source(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SAMPLE), encoding="utf-8")

    txs = FileSeedSource(path).fetch()
    assert len(txs) == 2

    with pytest.raises(FetchError):
        FileSeedSource(tmp_path / "missing.json").fetch()
