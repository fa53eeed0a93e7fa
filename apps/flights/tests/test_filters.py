"""Tests for post-search filters and display grouping."""

from __future__ import annotations

import pytest

from voyana_core.schemas import CabinClass, FlightFilters, GroupBy
from voyana_flights.pipeline.filters import (
    filter_flights,
    group_flights,
    parse_duration_hours,
)


@pytest.mark.parametrize(
    ("value", "hours"),
    [
        ("PT7H45M", 7.75),
        ("PT45M", 0.75),
        ("P1DT2H", 26.0),
        ("pt2h", 2.0),
        ("PT1H30M36S", 1.51),
        ("invalid", 0.0),
        ("", 0.0),
        (None, 0.0),
    ],
)
def test_parse_duration_hours(value, hours):
    assert parse_duration_hours(value) == pytest.approx(hours)


def test_filters_combine_with_and(make_flight):
    flights = [
        make_flight("a", price=300.0, stops=0),
        make_flight("b", price=450.0, stops=2),
        make_flight("c", price=600.0, stops=0),
        make_flight("d", price=499.0, stops=1),
    ]
    kept = filter_flights(flights, FlightFilters(max_price=500, max_stops=1))
    assert [f.id for f in kept] == ["a", "d"]


def test_no_filters_keeps_everything_in_order(make_flight):
    flights = [make_flight("b", price=900.0), make_flight("a", price=100.0)]
    assert filter_flights(flights, None) == flights
    assert filter_flights(flights, FlightFilters()) == flights


def test_zero_max_price_is_a_real_limit(make_flight):
    flights = [make_flight("free", price=0.0), make_flight("paid", price=10.0)]
    kept = filter_flights(flights, FlightFilters(max_price=0))
    assert [f.id for f in kept] == ["free"]


def test_preferred_carriers_match_name_or_flight_number(make_flight):
    flights = [
        make_flight("ba", carrier="British Airways", flight_number="BA117"),
        make_flight("aa", carrier="American Airlines", flight_number="AA100"),
        make_flight("dl", carrier="Delta Air Lines", flight_number="DL1"),
    ]
    by_code = filter_flights(flights, FlightFilters(preferred_carriers=["ba"]))
    by_name = filter_flights(flights, FlightFilters(preferred_carriers=["american"]))
    both = filter_flights(flights, FlightFilters(preferred_carriers=["BA", "Delta"]))

    assert [f.id for f in by_code] == ["ba"]
    assert [f.id for f in by_name] == ["aa"]
    assert [f.id for f in both] == ["ba", "dl"]


def test_cabin_filter(make_flight):
    flights = [
        make_flight("e", cabin_class=CabinClass.ECONOMY),
        make_flight("pe", cabin_class=CabinClass.PREMIUM_ECONOMY),
    ]
    kept = filter_flights(flights, FlightFilters(cabin_class="Premium_Economy"))
    assert [f.id for f in kept] == ["pe"]


@pytest.mark.parametrize(
    ("price", "label"),
    [
        (0.0, "Under $200"),
        (199.99, "Under $200"),
        (200.0, "$200-$500"),
        (499.99, "$200-$500"),
        (500.0, "$500-$1000"),
        (1000.0, "Over $1000"),
    ],
)
def test_price_bands(make_flight, price, label):
    grouped = group_flights([make_flight(price=price)], GroupBy.PRICE)
    assert list(grouped) == [label]


@pytest.mark.parametrize(
    ("duration", "label"),
    [
        ("PT2H59M", "Under 3h"),
        ("PT3H", "3-6h"),
        ("PT7H15M", "6-12h"),
        ("PT12H", "Over 12h"),
        ("invalid", "Under 3h"),
    ],
)
def test_duration_bands(make_flight, duration, label):
    grouped = group_flights([make_flight(duration=duration)], GroupBy.DURATION)
    assert list(grouped) == [label]


def test_stop_bands(make_flight):
    flights = [make_flight(f"s{n}", stops=n) for n in (0, 1, 2, 0)]
    grouped = group_flights(flights, "stops")
    assert {label: [f.id for f in members] for label, members in grouped.items()} == {
        "Non-stop": ["s0", "s0"],
        "1 stop": ["s1"],
        "2 stops": ["s2"],
    }


def test_carrier_groups_in_first_seen_order(make_flight):
    flights = [
        make_flight("1", carrier="Delta"),
        make_flight("2", carrier="British Airways"),
        make_flight("3", carrier="Delta"),
    ]
    grouped = group_flights(flights, GroupBy.CARRIER)
    assert list(grouped) == ["Delta", "British Airways"]
    assert [f.id for f in grouped["Delta"]] == ["1", "3"]


def test_unknown_group_by(make_flight):
    with pytest.raises(ValueError):
        group_flights([make_flight()], "airline")
