"""Review construction, filtering and display helpers."""

import time
from datetime import date as date_cls
from typing import Iterable, List, Optional

from .constants import InsightConstants, ReviewConstants
from .models import Review, SentimentResult


def format_month(year_month: str) -> str:
    """'2023-12' -> 'Dec 2023'. Returns '' for anything unparseable."""
    if not year_month or not isinstance(year_month, str):
        return ""
    parts = year_month.split("-")
    if len(parts) < 2 or not parts[1].isdigit():
        return ""
    month = int(parts[1])
    if not 1 <= month <= 12:
        return ""
    return f"{InsightConstants.MONTH_NAMES[month - 1]} {parts[0]}"


def format_aspect_name(aspect: str) -> str:
    """Capitalise the first letter of an aspect name."""
    if not aspect:
        return ""
    return aspect[0].upper() + aspect[1:]


def sentiment_label(score: float) -> str:
    """Display label for a 0-1 sentiment score."""
    for threshold, label in InsightConstants.SENTIMENT_LABELS:
        if score >= threshold:
            return label
    return InsightConstants.LOWEST_SENTIMENT_LABEL


def build_review(
    text: str,
    sentiment: SentimentResult,
    *,
    trip_type: str = ReviewConstants.DEFAULT_TRIP_TYPE,
    country: str = ReviewConstants.DEFAULT_COUNTRY,
    reviewer: str = ReviewConstants.DEFAULT_REVIEWER,
    review_id: Optional[str] = None,
    review_date: Optional[str] = None,
) -> Review:
    """Create a review from user text and its sentiment analysis.

    The id defaults to the current time in milliseconds and the date to today.
    """
    return Review(
        id=review_id or str(int(time.time() * 1000)),
        text=text,
        date=review_date or date_cls.today().isoformat(),
        overall_sentiment=float(sentiment.score),
        rating=int(sentiment.estimated_rating),
        sentiment_by_aspect=dict(sentiment.aspect_scores),
        trip_type=trip_type,
        country=country,
        reviewer=reviewer,
        keywords=sentiment.keywords,
        summary=sentiment.summary,
    )


def _is_any(value) -> bool:
    return value is None or value == ReviewConstants.ALL_FILTER


def filter_reviews(
    reviews: Iterable[Review],
    search: str = "",
    rating=None,
    country: Optional[str] = None,
    trip_type: Optional[str] = None,
) -> List[Review]:
    """Reviews matching every given filter, newest first.

    ``search`` matches review text or reviewer name, case-insensitively.
    ``None`` or ``"all"`` disables a filter.
    """
    needle = (search or "").lower()
    wanted_rating = None if _is_any(rating) else int(rating)

    def keep(r: Review) -> bool:
        if needle and needle not in r.text.lower() and needle not in r.reviewer.lower():
            return False
        if wanted_rating is not None and r.rating != wanted_rating:
            return False
        if not _is_any(country) and r.country != country:
            return False
        if not _is_any(trip_type) and r.trip_type != trip_type:
            return False
        return True

    return sorted((r for r in reviews if keep(r)), key=lambda r: r.date, reverse=True)


def unique_countries(reviews: Iterable[Review]) -> List[str]:
    return sorted({r.country for r in reviews if r.country})


def unique_trip_types(reviews: Iterable[Review]) -> List[str]:
    return sorted({r.trip_type for r in reviews if r.trip_type})
