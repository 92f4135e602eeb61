"""Tests for query building and the client-side predicates."""
from __future__ import annotations

import pytest

from app.repositories.properties import Operator, OrderBy, Predicate
from app.schemas.properties import FilterCriteria
from app.services import search


def test_empty_criteria_is_identity(make_record):
    criteria = FilterCriteria()
    query = search.build_query(criteria)

    assert query.predicates == ()
    assert query.order_by == OrderBy(field="created_at", descending=True)

    records = [make_record("a-0001"), make_record("b-0002")]
    assert search.apply_local_filters(records, criteria) == records


def test_custom_price_min_only():
    criteria = FilterCriteria(price_range="custom", custom_price_min=500000)
    query = search.build_query(criteria)

    assert query.predicates == (Predicate("price", Operator.GTE, 500000),)


def test_custom_price_both_bounds_and_neither():
    both = search.build_query(FilterCriteria(price_range="custom", custom_price_min="100", custom_price_max="900"))
    assert both.predicates == (
        Predicate("price", Operator.GTE, 100.0),
        Predicate("price", Operator.LTE, 900.0),
    )

    neither = search.build_query(FilterCriteria(price_range="custom"))
    assert neither.predicates == ()


def test_custom_price_ignores_non_numeric_and_non_positive():
    criteria = FilterCriteria(price_range="custom", custom_price_min="abc", custom_price_max="-5")

    assert criteria.custom_price_min is None
    assert search.build_query(criteria).predicates == ()


@pytest.mark.parametrize(
    ("bucket", "expected"),
    [
        ("0-500000", [(Operator.GTE, 0), (Operator.LTE, 500_000)]),
        ("500000-1000000", [(Operator.GTE, 500_000), (Operator.LTE, 1_000_000)]),
        ("2000000+", [(Operator.GTE, 2_000_000)]),
    ],
)
def test_named_price_buckets(bucket, expected):
    query = search.build_query(FilterCriteria(price_range=bucket))

    assert [(p.op, p.value) for p in query.predicates] == expected
    assert all(p.field == "price" for p in query.predicates)


def test_free_form_range_from_url_and_garbage():
    assert search.parse_price_range("300000-") == (300000.0, None)
    assert search.parse_price_range("-800000") == (0.0, 800000.0)
    assert search.parse_price_range("cheap") is None
    assert search.build_query(FilterCriteria(price_range="cheap")).predicates == ()


def test_all_predicates_compose_in_order():
    criteria = FilterCriteria(
        property_type="house",
        city="Springfield",
        price_range="500000-1000000",
        min_bedrooms=2,
        min_parking_spots="1",
    )
    fields = [(p.field, p.op) for p in search.build_query(criteria).predicates]

    assert fields == [
        ("property_type", Operator.EQ),
        ("city", Operator.EQ),
        ("price", Operator.GTE),
        ("price", Operator.LTE),
        ("bedrooms", Operator.GTE),
        ("parking_spots", Operator.GTE),
    ]


@pytest.mark.parametrize("sentinel", ["all", "todos", "ALL", ""])
def test_type_sentinel_adds_no_predicate(sentinel):
    assert search.build_query(FilterCriteria(property_type=sentinel)).predicates == ()


def test_code_fragment_matches_suffix_case_insensitively(make_record):
    record = make_record("listing-00AB12")

    assert search.apply_local_filters([record], FilterCriteria(code_fragment="ab1")) == [record]
    assert search.apply_local_filters([record], FilterCriteria(code_fragment="cd")) == []
    # "00" is in the id but not in its last four characters.
    assert search.apply_local_filters([record], FilterCriteria(code_fragment="00A")) == []


def test_favorites_only_intersects(make_record):
    first, second = make_record("one-1111"), make_record("two-2222")
    criteria = FilterCriteria(favorites_only=True)

    assert search.apply_local_filters([first, second], criteria, frozenset({"two-2222"})) == [second]
    assert search.apply_local_filters([first, second], criteria) == []


def test_params_mirror_round_trip_and_reset():
    params = {
        "type": "apartment",
        "city": "Shelbyville",
        "price": "custom",
        "price_min": "250000",
        "bedrooms": "3",
        "parking": "2",
        "code": "9b2",
        "favorite": "true",
    }
    criteria = search.criteria_from_params(params)

    assert criteria.custom_price_min == 250000
    assert criteria.min_bedrooms == 3
    assert criteria.favorites_only is True
    assert search.criteria_to_params(criteria) == params

    cleared = search.reset_filters()
    assert cleared == FilterCriteria()
    assert search.criteria_to_params(cleared) == {}
    assert search.criteria_from_params(search.criteria_to_params(cleared)) == cleared


def test_invalid_numeric_params_are_absent():
    criteria = search.criteria_from_params({"bedrooms": "many", "parking": "", "price_max": "x"})

    assert criteria.min_bedrooms is None
    assert criteria.min_parking_spots is None
    assert criteria.custom_price_max is None


def test_admin_filter_and_sort(make_record):
    records = [
        make_record("a-0001", title="Beach house", price=300.0, status="for_rent", age_days=2),
        make_record("b-0002", title="City flat", property_type="apartment", price=100.0, age_days=1),
        make_record("c-0003", title="Farm", neighborhood=None, city="Shelbyville", price=200.0, age_days=3),
    ]

    newest_first = search.filter_and_sort_admin(records)
    assert [r.id for r in newest_first] == ["b-0002", "a-0001", "c-0003"]

    by_price = search.filter_and_sort_admin(records, sort_key="price", direction="asc")
    assert [r.id for r in by_price] == ["b-0002", "c-0003", "a-0001"]

    assert [r.id for r in search.filter_and_sort_admin(records, search_term="shelby")] == ["c-0003"]
    assert [r.id for r in search.filter_and_sort_admin(records, status="for_rent")] == ["a-0001"]
    assert [r.id for r in search.filter_and_sort_admin(records, property_type="apartment")] == ["b-0002"]

    with pytest.raises(ValueError):
        search.filter_and_sort_admin(records, sort_key="password")
