"""Tests for itinerary documents and their display texts."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from apps.itineraries import domain


def landmark(name: str, minutes: int, image: str = ""):
    return SimpleNamespace(id=f"id-{name.lower()}", name=name, estimated_duration=minutes, image_url=image)


CITY = [landmark("Basilica", 60, "basilica.jpg"), landmark("Fort", 90)]
MOUNTAIN = [landmark("Temple", 120, "temple.jpg"), landmark("Sirao", 90), landmark("Tops", 60)]


def test_single_day_document_is_recomputed_from_landmarks():
    itinerary = domain.build_itinerary(CITY)

    assert itinerary.total_time == 170
    assert itinerary.total_price == 2000
    assert [stop.order for stop in itinerary.landmarks] == [1, 2]
    assert itinerary.to_document()["landmarks"][0]["image"] == "basilica.jpg"


def test_two_day_document():
    itinerary = domain.build_multi_day_itinerary([("cebu-city", CITY), ("mountain", MOUNTAIN)])

    assert itinerary.duration == domain.TWO_DAYS
    assert [plan.total_time for plan in itinerary.days] == [170, 310]
    assert itinerary.total_price == 2000 + 3500
    assert itinerary.days[1].tour_type == "mountain"


def test_multi_day_needs_one_or_two_days():
    with pytest.raises(ValueError):
        domain.build_multi_day_itinerary([])
    with pytest.raises(ValueError):
        domain.build_multi_day_itinerary([("cebu-city", CITY)] * 3)


def test_parse_round_trips_stored_json_text():
    document = domain.build_multi_day_itinerary([("cebu-city", CITY), ("mountain", MOUNTAIN)], True).to_document()

    parsed = domain.parse_itinerary_details(json.dumps(document))

    assert isinstance(parsed, domain.MultiDayItinerary)
    assert parsed.total_price == 7000
    assert parsed.is_full_package is True
    assert len(parsed.days[1].landmarks) == 3


@pytest.mark.parametrize("raw", [None, "", "{not json", "[1, 2]", {"landmarks": "oops"}])
def test_unreadable_documents_are_absent(raw):
    assert domain.parse_itinerary_details(raw) is None


def test_stops_follow_order_field_not_list_position():
    parsed = domain.parse_itinerary_details({
        "landmarks": [
            {"id": "b", "name": "Second", "duration": 30, "order": 2},
            {"id": "a", "name": "First", "duration": 30, "order": 1},
        ],
        "total_time": 80,
        "total_price": 2000,
    })

    assert domain.landmark_names(parsed) == "First, Second"


def test_single_day_display_texts():
    details = domain.build_itinerary(CITY)

    assert domain.itinerary_summary(details) == "2 landmarks • 3h tour"
    assert domain.pricing_breakdown_text(details) == "Base Rate (3h)"
    assert domain.first_landmark_image(details) == "basilica.jpg"
    assert domain.has_valid_itinerary(details)


def test_additional_hours_and_full_package_texts():
    long_day = domain.build_itinerary(MOUNTAIN)
    package = domain.build_itinerary(CITY, is_full_package=True)

    assert domain.pricing_breakdown_text(long_day) == "Base 3h + 3h additional"
    assert domain.pricing_breakdown_text(package) == "Full Package Deal"


def test_two_day_display_texts():
    hourly = domain.build_multi_day_itinerary([("cebu-city", CITY), ("mountain", MOUNTAIN)])
    package = domain.build_multi_day_itinerary([("cebu-city", CITY), ("mountain", MOUNTAIN)], True)

    assert domain.itinerary_summary(hourly) == "2-Day • 5 landmarks • 8h total"
    assert domain.pricing_breakdown_text(hourly) == "Day 1: 3h • Day 2: 6h"
    assert domain.pricing_breakdown_text(package) == "2-Day Full Package"
    assert domain.landmark_names(hourly) == "Basilica, Fort, Temple and 2 more"
    assert domain.first_landmark_image(hourly) == "basilica.jpg"


def test_missing_itinerary_falls_back():
    assert domain.itinerary_summary(None) == domain.DEFAULT_SUMMARY
    assert domain.landmark_names(None) == domain.DEFAULT_SUMMARY
    assert domain.pricing_breakdown_text(None) == ""
    assert domain.first_landmark_image(None) is None
    assert not domain.has_valid_itinerary(domain.Itinerary(landmarks=[], total_time=0, total_price=0))
