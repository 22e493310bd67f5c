"""Shared fixtures for GuestInsight tests."""

import pytest

from guestinsight.core.models import Review


def _review(id="r1", date="2024-01-15", sentiment=0.5, rating=3, aspects=None, trip_type="", country="", reviewer="", text=""):
    return Review(
        id=id,
        text=text or f"Review {id}",
        date=date,
        overall_sentiment=sentiment,
        rating=rating,
        sentiment_by_aspect=aspects or {},
        trip_type=trip_type,
        country=country,
        reviewer=reviewer,
    )


@pytest.fixture
def make_review():
    """Factory for reviews with sensible defaults."""
    return _review


@pytest.fixture
def sample_reviews():
    """A small collection spanning three months."""
    return [
        _review("r1", "2024-01-05", 0.9, 5, {"service": 0.9, "room": 0.8}, "Couple", "France", "Alice",
                "Excellent service and a lovely room"),
        _review("r2", "2024-01-20", 0.3, 2, {"food": 0.2}, "Business", "Germany", "Bob",
                "The food was terrible"),
        _review("r3", "2024-02-11", 0.7, 4, {"service": 0.7, "location": 0.9}, "Couple", "Spain", "Carla",
                "Friendly staff, perfect location"),
        _review("r4", "2024-03-02", 0.5, 3, {"room": 0.5}, "Family", "France", "Dan",
                "The room was fine"),
    ]
