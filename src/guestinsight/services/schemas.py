"""Expected shapes of analysis API responses."""

from typing import Annotated, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..core.constants import ScoringConstants
from ..core.models import (
    Keywords, SentimentResult, AspectScore, Trend, Recommendation, Anomaly,
    CompetitiveInsights, InsightBundle, round_half_up,
)

Score = Annotated[float, Field(ge=0.0, le=1.0)]


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class KeywordsPayload(_Payload):
    positive: List[str] = Field(default_factory=list)
    negative: List[str] = Field(default_factory=list)


class SentimentPayload(_Payload):
    """Single-review analysis. The overall score may be called ``overallSentiment``."""

    score: Score = Field(validation_alias=AliasChoices("score", "overallSentiment"))
    estimated_rating: float = Field(alias="estimatedRating", ge=1, le=5)
    aspects: List[str]
    aspect_scores: Dict[str, Score] = Field(alias="aspectScores")
    keywords: KeywordsPayload
    summary: str

    def to_result(self) -> SentimentResult:
        rating = round_half_up(self.estimated_rating)
        return SentimentResult(
            score=round(self.score, ScoringConstants.SCORE_DECIMALS),
            estimated_rating=max(ScoringConstants.MIN_RATING, min(ScoringConstants.MAX_RATING, rating)),
            aspects=list(self.aspects),
            aspect_scores=dict(self.aspect_scores),
            keywords=Keywords(positive=list(self.keywords.positive), negative=list(self.keywords.negative)),
            summary=self.summary,
        )


class AspectScorePayload(_Payload):
    aspect: str
    score: Score


class TrendPayload(_Payload):
    type: Literal["overall", "aspect"]
    month: str = Field(pattern=r"^\d{4}-\d{2}$")
    aspect: Optional[str] = None
    change: float
    message: str


class RecommendationPayload(_Payload):
    aspect: str
    score: Score
    action: str


class AnomalyPayload(_Payload):
    date: str
    aspect: str
    score: Score
    average_score: Score = Field(alias="averageScore")
    message: str


class CompetitivePayload(_Payload):
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)


class InsightPayload(_Payload):
    """Batch insight generation."""

    top_aspects: List[AspectScorePayload] = Field(alias="topAspects")
    bottom_aspects: List[AspectScorePayload] = Field(alias="bottomAspects")
    trends: List[TrendPayload]
    recommendations: List[RecommendationPayload]
    anomalies: List[AnomalyPayload]
    competitive_insights: CompetitivePayload = Field(alias="competitiveInsights")

    def to_bundle(self) -> InsightBundle:
        return InsightBundle(
            top_aspects=[AspectScore(a.aspect, a.score) for a in self.top_aspects],
            bottom_aspects=[AspectScore(a.aspect, a.score) for a in self.bottom_aspects],
            trends=[
                Trend(type=t.type, month=t.month, change=t.change, message=t.message, aspect=t.aspect)
                for t in self.trends
            ],
            recommendations=[Recommendation(r.aspect, r.score, r.action) for r in self.recommendations],
            anomalies=[
                Anomaly(date=a.date, aspect=a.aspect, score=a.score, average_score=a.average_score, message=a.message)
                for a in self.anomalies
            ],
            competitive_insights=CompetitiveInsights(
                strengths=list(self.competitive_insights.strengths),
                weaknesses=list(self.competitive_insights.weaknesses),
            ),
        )
