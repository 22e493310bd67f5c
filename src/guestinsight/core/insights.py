"""Insight derivation: top/bottom aspects, trends, anomalies and recommendations."""

import logging
from collections import defaultdict
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .aggregation import ReviewAggregator
from .config import Settings, settings as default_settings
from .constants import InsightConstants
from .errors import AnalysisFailure, AnalysisResult
from .lexicon import action_for_aspect
from .models import (
    Review, MonthlyRollup, AspectAggregate, AspectScore, Trend, Anomaly,
    Recommendation, CompetitiveInsights, InsightBundle,
)
from .reviews import format_month, format_aspect_name

logger = logging.getLogger(__name__)

# Scores are compared with this slack so that e.g. 0.7 - 0.4 counts as 0.3
_EPSILON = 1e-9


class AnalysisStrategy(str, Enum):
    """Where analysis results come from."""

    LOCAL = "local"
    REMOTE = "remote"

    @classmethod
    def parse(cls, value) -> "AnalysisStrategy":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


def rank_aspects(aggregates: List[AspectAggregate], count: int = InsightConstants.TOP_ASPECT_COUNT):
    """Return (top, bottom) aspects: highest first and lowest first."""
    ordered = sorted(aggregates, key=lambda a: (-a.score, a.aspect))
    top = [AspectScore(a.aspect, round(a.score, 2)) for a in ordered[:count]]
    lowest = sorted(aggregates, key=lambda a: (a.score, a.aspect))
    bottom = [AspectScore(a.aspect, round(a.score, 2)) for a in lowest[:count]]
    return top, bottom


def _trend_message(label: str, change: float, month: str) -> str:
    when = format_month(month)
    if change == 0:
        return f"{label} sentiment was unchanged in {when}"
    direction = "increased" if change > 0 else "decreased"
    return f"{label} sentiment {direction} by {abs(change) * 100:.1f}% in {when}"


def series_trends(rollups: List[MonthlyRollup], trend_type: str, aspect: Optional[str] = None) -> List[Trend]:
    """Month-over-month changes of one series; the first month has none."""
    label = "Overall" if aspect is None else format_aspect_name(aspect)
    trends = []
    for prev, curr in zip(rollups, rollups[1:]):
        change = round(curr.sentiment - prev.sentiment, InsightConstants.CHANGE_DECIMALS)
        trends.append(Trend(
            type=trend_type,
            month=curr.month,
            change=change,
            message=_trend_message(label, change, curr.month),
            aspect=aspect,
        ))
    return trends


def detect_anomalies(reviews: Sequence[Review], threshold: float) -> List[Anomaly]:
    """Aspect scores that deviate from the aspect's average over the other reviews.

    An aspect reported by a single review has no average to deviate from and is
    never flagged.
    """
    totals: Dict[str, List[float]] = defaultdict(lambda: [0.0, 0])
    for r in reviews:
        for aspect, score in r.sentiment_by_aspect.items():
            totals[aspect][0] += score
            totals[aspect][1] += 1

    anomalies = []
    for r in reviews:
        for aspect, score in r.sentiment_by_aspect.items():
            total, count = totals[aspect]
            if count < 2:
                continue
            others = (total - score) / (count - 1)
            deviation = score - others
            if abs(deviation) + _EPSILON < threshold:
                continue
            kind = "low" if deviation < 0 else "high"
            anomalies.append(Anomaly(
                date=r.date,
                aspect=aspect,
                score=round(score, 2),
                average_score=round(others, 2),
                message=f"Unexpected {kind} rating for {aspect}",
            ))
    return anomalies


def recommend(aggregates: List[AspectAggregate], threshold: float, actions: Optional[dict] = None) -> List[Recommendation]:
    """One suggested action per aspect scoring below the threshold, weakest first."""
    weak = [a for a in aggregates if a.score < threshold]
    weak.sort(key=lambda a: (a.score, a.aspect))
    return [
        Recommendation(aspect=a.aspect, score=round(a.score, 2), action=action_for_aspect(a.aspect, actions))
        for a in weak
    ]


class InsightEngine:
    """Derives an InsightBundle locally or through the analysis gateway.

    Args:
        strategy: LOCAL runs the deterministic algorithm, REMOTE asks the gateway
        gateway: Object with an async ``generate_insights(reviews)`` method;
            required for REMOTE
        fallback: Default for ``derive``: replace a failed remote call with the
            local result
        settings: Source of the anomaly and recommendation thresholds
    """

    def __init__(
        self,
        strategy=AnalysisStrategy.LOCAL,
        gateway=None,
        fallback: bool = True,
        settings: Optional[Settings] = None,
        aggregator: Optional[ReviewAggregator] = None,
        actions: Optional[dict] = None,
    ):
        cfg = settings or default_settings
        self.strategy = AnalysisStrategy.parse(strategy)
        self.gateway = gateway
        self.fallback = fallback
        self.anomaly_threshold = cfg.anomaly_threshold
        self.recommendation_threshold = cfg.recommendation_threshold
        self.aggregator = aggregator or ReviewAggregator()
        self.actions = actions
        if self.strategy is AnalysisStrategy.REMOTE and gateway is None:
            raise ValueError("REMOTE strategy requires a gateway")

    def trends(self, reviews: Sequence[Review]) -> List[Trend]:
        """Overall trends first, then per-aspect trends by aspect name."""
        trends = series_trends(self.aggregator.monthly_rollups(reviews), "overall")
        for aspect, rollups in self.aggregator.aspect_monthly_rollups(reviews).items():
            trends.extend(series_trends(rollups, "aspect", aspect))
        return trends

    def derive_local(self, reviews: Sequence[Review]) -> InsightBundle:
        """Deterministic insights; never fails, empty input gives an empty bundle."""
        reviews = list(reviews or [])
        aggregates = self.aggregator.aspect_aggregates(reviews)
        top, bottom = rank_aspects(aggregates)
        bundle = InsightBundle(
            top_aspects=top,
            bottom_aspects=bottom,
            trends=self.trends(reviews),
            recommendations=recommend(aggregates, self.recommendation_threshold, self.actions),
            anomalies=detect_anomalies(reviews, self.anomaly_threshold),
            competitive_insights=CompetitiveInsights(),
        )
        logger.info(
            f"Derived local insights: {len(bundle.trends)} trends, {len(bundle.anomalies)} anomalies, "
            f"{len(bundle.recommendations)} recommendations"
        )
        return bundle

    async def derive(self, reviews: Sequence[Review], fallback: Optional[bool] = None) -> AnalysisResult[InsightBundle]:
        """Insights for a review collection according to the configured strategy.

        With REMOTE, a gateway failure is returned in the result, or, when
        falling back, logged and attached to a local result.
        """
        reviews = list(reviews or [])
        use_fallback = self.fallback if fallback is None else fallback

        if self.strategy is AnalysisStrategy.LOCAL or not reviews:
            return AnalysisResult.success(self.derive_local(reviews), source="local")

        try:
            bundle = await self.gateway.generate_insights(reviews)
        except AnalysisFailure as e:
            if not use_fallback:
                logger.error(f"Insight generation failed: {e}")
                return AnalysisResult.failure(e)
            logger.warning(f"Insight generation failed, using local insights: {e}")
            return AnalysisResult.fallback(self.derive_local(reviews), e)
        return AnalysisResult.success(bundle, source="remote")


def derive_insights(reviews: Sequence[Review], settings: Optional[Settings] = None) -> InsightBundle:
    """Local insights for a review collection."""
    return InsightEngine(AnalysisStrategy.LOCAL, settings=settings).derive_local(reviews)
