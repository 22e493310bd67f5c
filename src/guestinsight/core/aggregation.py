"""Aggregation of review collections into dashboard metrics."""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from .models import (
    Review, MonthlyRollup, AspectAggregate, CategoryCount, RatingCount, DashboardMetrics,
)

logger = logging.getLogger(__name__)

RATING_KEYS = (1, 2, 3, 4, 5)


def _mean(total: float, count: int) -> float:
    return total / count if count else 0.0


class ReviewAggregator:
    """Folds a list of reviews into chart-ready summaries.

    Every method is pure: the input sequence is only read, and calling a
    method twice on equal input yields equal output. Callers that render
    often should memoize on their collection's identity.
    """

    def overall_sentiment(self, reviews: Sequence[Review]) -> str:
        """Mean overall sentiment formatted to 2 decimals ("0.00" when empty)."""
        if not reviews:
            return "0.00"
        return f"{_mean(sum(r.overall_sentiment for r in reviews), len(reviews)):.2f}"

    def average_rating(self, reviews: Sequence[Review]) -> str:
        """Mean star rating formatted to 1 decimal ("0.0" when empty)."""
        if not reviews:
            return "0.0"
        return f"{_mean(sum(r.rating for r in reviews), len(reviews)):.1f}"

    def monthly_rollups(self, reviews: Sequence[Review]) -> List[MonthlyRollup]:
        """Per-month count and mean sentiment/rating, oldest month first."""
        buckets = defaultdict(lambda: {"count": 0, "sentiment": 0.0, "rating": 0.0})
        for r in reviews:
            b = buckets[r.month]
            b["count"] += 1
            b["sentiment"] += r.overall_sentiment
            b["rating"] += r.rating

        # zero-padded ISO months sort chronologically as strings
        return [
            MonthlyRollup(
                month=month,
                count=b["count"],
                sentiment=_mean(b["sentiment"], b["count"]),
                rating=_mean(b["rating"], b["count"]),
            )
            for month, b in sorted(buckets.items())
        ]

    def aspect_aggregates(self, reviews: Sequence[Review]) -> List[AspectAggregate]:
        """Mean score per aspect, best first (ties by aspect name).

        Reviews that do not report an aspect do not count towards its mean.
        """
        totals: Dict[str, List[float]] = defaultdict(lambda: [0.0, 0])
        for r in reviews:
            for aspect, score in r.sentiment_by_aspect.items():
                t = totals[aspect]
                t[0] += score
                t[1] += 1

        out = [AspectAggregate(aspect=a, score=_mean(t[0], t[1]), count=t[1]) for a, t in totals.items()]
        out.sort(key=lambda x: (-x.score, x.aspect))
        return out

    def aspect_monthly_rollups(self, reviews: Sequence[Review]) -> Dict[str, List[MonthlyRollup]]:
        """Per-aspect monthly means, keyed by aspect name.

        ``sentiment`` holds the aspect's mean score for the month; ``rating``
        is the mean star rating of the contributing reviews.
        """
        buckets = defaultdict(lambda: defaultdict(lambda: {"count": 0, "score": 0.0, "rating": 0.0}))
        for r in reviews:
            for aspect, score in r.sentiment_by_aspect.items():
                b = buckets[aspect][r.month]
                b["count"] += 1
                b["score"] += score
                b["rating"] += r.rating

        return {
            aspect: [
                MonthlyRollup(
                    month=month,
                    count=b["count"],
                    sentiment=_mean(b["score"], b["count"]),
                    rating=_mean(b["rating"], b["count"]),
                )
                for month, b in sorted(months.items())
            ]
            for aspect, months in sorted(buckets.items())
        }

    def trip_type_distribution(self, reviews: Sequence[Review]) -> List[CategoryCount]:
        """Review count per trip type, in first-seen order."""
        counts: Dict[str, int] = {}
        for r in reviews:
            if not r.trip_type:
                continue
            counts[r.trip_type] = counts.get(r.trip_type, 0) + 1
        return [CategoryCount(name=k, value=v) for k, v in counts.items()]

    def rating_distribution(self, reviews: Sequence[Review]) -> List[RatingCount]:
        """Review count per star rating; always lists ratings 1 to 5."""
        counts = {k: 0 for k in RATING_KEYS}
        for r in reviews:
            if r.rating in counts:
                counts[r.rating] += 1
        return [RatingCount(rating=k, count=counts[k]) for k in RATING_KEYS]

    def aggregate(self, reviews: Sequence[Review]) -> DashboardMetrics:
        """Compute every dashboard metric for a review collection."""
        reviews = list(reviews or [])
        if not reviews:
            logger.debug("Aggregating empty review collection")

        metrics = DashboardMetrics(
            overall_sentiment=self.overall_sentiment(reviews),
            average_rating=self.average_rating(reviews),
            total_reviews=len(reviews),
            monthly_rollups=self.monthly_rollups(reviews),
            aspect_aggregates=self.aspect_aggregates(reviews),
            trip_type_distribution=self.trip_type_distribution(reviews),
            rating_distribution=self.rating_distribution(reviews),
        )
        logger.info(
            f"Aggregated {metrics.total_reviews} reviews into {len(metrics.monthly_rollups)} months "
            f"and {len(metrics.aspect_aggregates)} aspects"
        )
        return metrics


_default_aggregator = ReviewAggregator()


def aggregate(reviews: Sequence[Review]) -> DashboardMetrics:
    """Dashboard metrics for a review collection."""
    return _default_aggregator.aggregate(reviews)
