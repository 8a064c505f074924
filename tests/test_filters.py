import pytest

from sales_dashboard.core.filters import (
    MatchNothing,
    PriceRange,
    SoldEquals,
    TextContains,
    all_of,
    build_month_filter,
    build_search_filter,
)
from sales_dashboard.core.models import Transaction


def _tx(**overrides):
    data = dict(
        title="Blue Shirt",
        description="Cotton shirt",
        price=150.0,
        category="clothing",
        date_of_sale="2024-01-10",
        sold=True,
    )
    data.update(overrides)
    return Transaction(**data)


def test_month_sentinel_matches_nothing():
    pred = build_month_filter(None)
    assert not pred.matches(_tx())
    assert pred.to_sql() == ("0 = 1", [])
    assert pred.to_mongo() == {"_id": {"$in": []}}


@pytest.mark.parametrize("month", [0, 13, -1, 10**20])
def test_out_of_range_month_matches_nothing(month):
    assert build_month_filter(month) == MatchNothing()


def test_month_filter_matches_any_year():
    pred = build_month_filter(1)
    assert pred.matches(_tx())
    assert pred.matches(_tx(date_of_sale="1999-01-31"))
    assert not pred.matches(_tx(date_of_sale="2024-02-01"))
    assert pred.to_sql() == ("sale_month = ?", [1])
    assert pred.to_mongo() == {"$expr": {"$eq": [{"$month": "$dateOfSale"}, 1]}}


def test_month_is_evaluated_in_utc():
    # 02:00 on Dec 1st at +05:30 is still Nov 30th in UTC
    tx = _tx(date_of_sale="2021-12-01T02:00:00+05:30")
    assert build_month_filter(11).matches(tx)
    assert not build_month_filter(12).matches(tx)


def test_empty_search_adds_no_clause():
    assert build_search_filter("") is None
    assert build_search_filter(None) is None


def test_search_is_case_insensitive_on_title_and_description():
    pred = build_search_filter("SHIRT")
    assert pred.matches(_tx())
    assert pred.matches(_tx(title="Hat", description="a shirt-like hat"))
    assert not pred.matches(_tx(title="Hat", description="Wool"))


def test_numeric_search_matches_exact_price():
    pred = build_search_filter("150")
    assert pred.matches(_tx(title="Hat", description="Wool"))
    assert not pred.matches(_tx(title="Hat", description="Wool", price=150.5))


def test_non_numeric_search_price_clause_matches_nothing():
    pred = build_search_filter("abc")
    assert isinstance(pred.clauses[2], MatchNothing)
    sql, params = pred.to_sql()
    assert sql == "(icontains(title, ?)) OR (icontains(description, ?)) OR (0 = 1)"
    assert params == ["abc", "abc"]


def test_search_escapes_regex_for_mongo():
    pred = build_search_filter("a.b")
    assert pred.to_mongo()["$or"][0] == {"title": {"$regex": r"a\.b", "$options": "i"}}
    assert pred.to_mongo()["$or"][2] == {"_id": {"$in": []}}


def test_all_of_skips_missing_clauses():
    pred = all_of(build_month_filter(1), None, SoldEquals(True))
    assert pred.to_sql() == ("(sale_month = ?) AND (sold = ?)", [1, 1])
    assert pred.to_mongo() == {
        "$and": [
            {"$expr": {"$eq": [{"$month": "$dateOfSale"}, 1]}},
            {"sold": True},
        ]
    }
    assert all_of(build_month_filter(2), None) == build_month_filter(2)


def test_price_range_bounds():
    bucket = PriceRange(100, 200, low_inclusive=False)
    assert not bucket.matches(_tx(price=100))
    assert bucket.matches(_tx(price=100.5))
    assert bucket.matches(_tx(price=200))
    assert not bucket.matches(_tx(price=200.01))
    assert bucket.to_sql() == ("price > ? AND price <= ?", [100, 200])

    open_ended = PriceRange(900, None, low_inclusive=False)
    assert open_ended.matches(_tx(price=10_000))
    assert open_ended.to_sql() == ("price > ?", [900])
    assert open_ended.to_mongo() == {"price": {"$gt": 900}}
    assert PriceRange(0, 100).to_mongo() == {"price": {"$gte": 0, "$lte": 100}}


def test_text_contains_rejects_unknown_fields():
    with pytest.raises(ValueError):
        TextContains("category", "x")
