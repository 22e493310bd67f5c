"""Tests for insight derivation."""

import asyncio

import pytest

from guestinsight.core.aggregation import ReviewAggregator
from guestinsight.core.config import Settings
from guestinsight.core.errors import AnalysisFailure, FailureKind
from guestinsight.core.insights import (
    AnalysisStrategy,
    InsightEngine,
    derive_insights,
    detect_anomalies,
    rank_aspects,
    recommend,
)
from guestinsight.core.lexicon import HOTEL_ACTIONS
from guestinsight.core.models import AspectAggregate, AspectScore, InsightBundle


class FakeGateway:
    """Stands in for the analysis gateway."""

    def __init__(self, bundle=None, error=None):
        self.bundle = bundle
        self.error = error
        self.calls = 0

    async def generate_insights(self, reviews):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.bundle


def test_top_and_bottom_aspects(make_review):
    """Top is best first, bottom is worst first."""
    reviews = [make_review("1", aspects={"service": 0.9, "room": 0.8, "food": 0.6, "pool": 0.7})]
    top, bottom = rank_aspects(ReviewAggregator().aspect_aggregates(reviews))

    assert [a.aspect for a in top] == ["service", "room", "pool"]
    assert [a.aspect for a in bottom] == ["food", "pool", "room"]
    assert top[0] == AspectScore("service", 0.9)


def test_fewer_than_three_aspects(make_review):
    top, bottom = rank_aspects(ReviewAggregator().aspect_aggregates([make_review("1", aspects={"service": 0.9})]))
    assert top == [AspectScore("service", 0.9)]
    assert bottom == [AspectScore("service", 0.9)]


def test_overall_trend(make_review):
    reviews = [make_review("1", "2024-01-10", 0.8), make_review("2", "2024-02-10", 0.6)]

    trends = derive_insights(reviews).trends

    assert len(trends) == 1
    assert trends[0].type == "overall"
    assert trends[0].month == "2024-02"
    assert trends[0].change == -0.2
    assert trends[0].message == "Overall sentiment decreased by 20.0% in Feb 2024"


def test_aspect_trend_skips_missing_months(make_review):
    """Aspect trends compare consecutive months in which the aspect appears."""
    reviews = [
        make_review("1", "2024-01-10", 0.5, aspects={"service": 0.5}),
        make_review("2", "2024-02-10", 0.5),
        make_review("3", "2024-03-10", 0.5, aspects={"service": 0.8}),
    ]

    trends = [t for t in derive_insights(reviews).trends if t.type == "aspect"]

    assert len(trends) == 1
    assert trends[0].aspect == "service"
    assert trends[0].month == "2024-03"
    assert trends[0].change == 0.3
    assert trends[0].message == "Service sentiment increased by 30.0% in Mar 2024"


def test_single_month_has_no_trends(make_review):
    reviews = [make_review("1", "2024-01-10", 0.2), make_review("2", "2024-01-20", 0.9)]
    assert derive_insights(reviews).trends == []


def test_unchanged_month(make_review):
    reviews = [make_review("1", "2024-01-10", 0.5), make_review("2", "2024-02-10", 0.5)]
    trends = derive_insights(reviews).trends
    assert trends[0].change == 0
    assert trends[0].message == "Overall sentiment was unchanged in Feb 2024"


def test_overall_trends_come_first(make_review):
    reviews = [
        make_review("1", "2024-01-10", 0.4, aspects={"room": 0.4, "bed": 0.6}),
        make_review("2", "2024-02-10", 0.6, aspects={"room": 0.6, "bed": 0.4}),
    ]
    trends = derive_insights(reviews).trends
    assert [(t.type, t.aspect) for t in trends] == [("overall", None), ("aspect", "bed"), ("aspect", "room")]


def test_aspect_reported_once_is_never_anomalous(make_review):
    reviews = [make_review("1", aspects={"spa": 0.95}), make_review("2"), make_review("3")]
    assert detect_anomalies(reviews, 0.3) == []


def test_low_anomaly(make_review):
    reviews = [
        make_review("1", "2024-01-01", aspects={"service": 0.9}),
        make_review("2", "2024-01-02", aspects={"service": 0.9}),
        make_review("3", "2024-01-03", aspects={"service": 0.9}),
        make_review("4", "2024-02-05", aspects={"service": 0.3}),
    ]

    anomalies = detect_anomalies(reviews, 0.3)

    assert len(anomalies) == 1
    assert anomalies[0].to_dict() == {
        "date": "2024-02-05",
        "aspect": "service",
        "score": 0.3,
        "averageScore": 0.9,
        "message": "Unexpected low rating for service",
    }


def test_high_anomaly(make_review):
    reviews = [
        make_review("1", aspects={"pool": 0.4}),
        make_review("2", aspects={"pool": 0.4}),
        make_review("3", aspects={"pool": 0.4}),
        make_review("4", aspects={"pool": 0.95}),
    ]

    anomalies = detect_anomalies(reviews, 0.3)

    assert len(anomalies) == 1
    assert anomalies[0].message == "Unexpected high rating for pool"


def test_anomaly_threshold_is_inclusive(make_review):
    """A deviation equal to the threshold is flagged."""
    reviews = [make_review("1", aspects={"bed": 0.7}), make_review("2", aspects={"bed": 0.4})]
    assert len(detect_anomalies(reviews, 0.3)) == 2
    assert detect_anomalies(reviews, 0.5) == []


def test_anomaly_threshold_from_settings(make_review):
    reviews = [make_review("1", aspects={"bed": 0.7}), make_review("2", aspects={"bed": 0.4})]
    assert derive_insights(reviews, Settings(anomaly_threshold=0.5)).anomalies == []


def test_recommendations_below_threshold():
    aggregates = [
        AspectAggregate("service", 0.9, 3),
        AspectAggregate("pool", 0.7, 2),
        AspectAggregate("food", 0.6, 4),
        AspectAggregate("bed", 0.75, 1),
    ]

    recs = recommend(aggregates, 0.75)

    assert [r.aspect for r in recs] == ["food", "pool"]
    assert recs[0].action == HOTEL_ACTIONS["food"]
    assert recs[1].score == 0.7


def test_recommendation_uses_unrounded_mean():
    """A mean just under the threshold is recommended even though it displays as 0.75."""
    recs = recommend([AspectAggregate("bed", 0.7496, 5), AspectAggregate("pool", 0.7504, 5)], 0.75)

    assert [r.aspect for r in recs] == ["bed"]
    assert recs[0].score == 0.75


def test_recommendation_for_unknown_aspect():
    recs = recommend([AspectAggregate("wifi", 0.5, 2)], 0.75)
    assert recs[0].action == "Investigate recent guest feedback about the wifi and define concrete improvement steps."


def test_empty_collection_gives_empty_bundle():
    bundle = derive_insights([])
    assert bundle.to_dict() == {
        "topAspects": [],
        "bottomAspects": [],
        "trends": [],
        "recommendations": [],
        "anomalies": [],
        "competitiveInsights": {"strengths": [], "weaknesses": []},
    }


def test_derive_does_not_modify_input(sample_reviews):
    before = list(sample_reviews)
    derive_insights(sample_reviews)
    assert sample_reviews == before


def test_local_derive(sample_reviews):
    result = asyncio.run(InsightEngine().derive(sample_reviews))

    assert result.ok
    assert result.source == "local"
    assert result.value == derive_insights(sample_reviews)


def test_remote_derive(sample_reviews):
    remote = InsightBundle(top_aspects=[AspectScore("location", 0.95)])
    gateway = FakeGateway(bundle=remote)
    engine = InsightEngine(AnalysisStrategy.REMOTE, gateway)

    result = asyncio.run(engine.derive(sample_reviews))

    assert result.ok
    assert result.source == "remote"
    assert result.value is remote
    assert gateway.calls == 1


def test_remote_failure_falls_back(sample_reviews):
    error = AnalysisFailure(FailureKind.RATE_LIMITED, "slow down", 429)
    engine = InsightEngine("remote", FakeGateway(error=error))

    result = asyncio.run(engine.derive(sample_reviews))

    assert result.fallback_used
    assert result.source == "local"
    assert result.error is error
    assert result.value == derive_insights(sample_reviews)


def test_remote_failure_without_fallback(sample_reviews):
    error = AnalysisFailure(FailureKind.MALFORMED_RESPONSE, "not json")
    engine = InsightEngine(AnalysisStrategy.REMOTE, FakeGateway(error=error), fallback=False)

    result = asyncio.run(engine.derive(sample_reviews))

    assert not result.ok
    assert result.value is None
    assert result.error.kind is FailureKind.MALFORMED_RESPONSE
    with pytest.raises(AnalysisFailure):
        result.unwrap()


def test_remote_with_no_reviews_skips_gateway():
    gateway = FakeGateway(error=AnalysisFailure(FailureKind.TRANSPORT, "unreachable"))
    result = asyncio.run(InsightEngine(AnalysisStrategy.REMOTE, gateway).derive([]))
    assert result.ok
    assert gateway.calls == 0


def test_remote_requires_gateway():
    with pytest.raises(ValueError):
        InsightEngine(AnalysisStrategy.REMOTE)


def test_strategy_parse():
    assert AnalysisStrategy.parse("Remote") is AnalysisStrategy.REMOTE
    assert AnalysisStrategy.parse(AnalysisStrategy.LOCAL) is AnalysisStrategy.LOCAL
    with pytest.raises(ValueError):
        AnalysisStrategy.parse("cloud")
