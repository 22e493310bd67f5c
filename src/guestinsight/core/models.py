"""Data models for GuestInsight."""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional, List, Dict, Any, Mapping


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(float(value) + 0.5))


@dataclass
class Keywords:
    """Keyword hits found in a review."""
    positive: List[str] = field(default_factory=list)
    negative: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Keywords"]:
        if data is None:
            return None
        return cls(
            positive=[str(w) for w in data.get("positive", []) or []],
            negative=[str(w) for w in data.get("negative", []) or []],
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {"positive": list(self.positive), "negative": list(self.negative)}


@dataclass(frozen=True)
class Review:
    """A single guest review. Never mutated after creation."""
    id: str
    text: str
    date: str  # ISO YYYY-MM-DD
    overall_sentiment: float
    rating: int
    sentiment_by_aspect: Mapping[str, float] = field(default_factory=dict)
    trip_type: str = ""
    country: str = ""
    reviewer: str = ""
    keywords: Optional[Keywords] = None
    summary: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "sentiment_by_aspect", MappingProxyType(dict(self.sentiment_by_aspect or {})))

    def __hash__(self):
        # the aspect mapping proxy is unhashable; equal reviews share an id
        return hash(self.id)

    @property
    def month(self) -> str:
        """Monthly bucket key (YYYY-MM)."""
        return self.date[:7]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Review":
        """Build a review from its camelCase JSON form."""
        aspects = data.get("sentimentByAspect") or {}
        return cls(
            id=str(data["id"]),
            text=data.get("text", data.get("reviewText", "")) or "",
            date=str(data["date"]),
            overall_sentiment=float(data.get("overallSentiment", 0.0)),
            rating=round_half_up(data.get("rating", 0)),
            sentiment_by_aspect={str(k): float(v) for k, v in aspects.items()},
            trip_type=data.get("tripType", "") or "",
            country=data.get("country", "") or "",
            reviewer=data.get("reviewer", "") or "",
            keywords=Keywords.from_dict(data.get("keywords")),
            summary=data.get("summary"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "id": self.id,
            "text": self.text,
            "date": self.date,
            "overallSentiment": self.overall_sentiment,
            "rating": self.rating,
            "sentimentByAspect": dict(self.sentiment_by_aspect),
            "tripType": self.trip_type,
            "country": self.country,
            "reviewer": self.reviewer,
        }
        if self.keywords is not None:
            out["keywords"] = self.keywords.to_dict()
        if self.summary is not None:
            out["summary"] = self.summary
        return out


@dataclass
class SentimentResult:
    """Fixed-shape result of analysing one review text."""
    score: float
    estimated_rating: int
    aspects: List[str]
    aspect_scores: Dict[str, float]
    keywords: Keywords
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "estimatedRating": self.estimated_rating,
            "aspects": list(self.aspects),
            "aspectScores": dict(self.aspect_scores),
            "keywords": self.keywords.to_dict(),
            "summary": self.summary,
        }


@dataclass
class MonthlyRollup:
    """Reviews of one calendar month."""
    month: str  # YYYY-MM
    count: int
    sentiment: float
    rating: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "sentiment": f"{self.sentiment:.2f}",
            "rating": f"{self.rating:.1f}",
            "reviews": self.count,
        }


@dataclass
class AspectAggregate:
    """Mean sentiment of one aspect over the reviews that mention it."""
    aspect: str
    score: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"aspect": self.aspect, "score": f"{self.score:.2f}", "value": round(self.score, 2), "count": self.count}


@dataclass
class CategoryCount:
    name: str
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass
class RatingCount:
    rating: int
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"rating": self.rating, "count": self.count}


@dataclass
class DashboardMetrics:
    """Chart-ready summary of a review collection."""
    overall_sentiment: str
    average_rating: str
    total_reviews: int
    monthly_rollups: List[MonthlyRollup]
    aspect_aggregates: List[AspectAggregate]
    trip_type_distribution: List[CategoryCount]
    rating_distribution: List[RatingCount]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overallSentiment": self.overall_sentiment,
            "averageRating": self.average_rating,
            "totalReviews": self.total_reviews,
            "monthlyRollups": [m.to_dict() for m in self.monthly_rollups],
            "aspectAggregates": [a.to_dict() for a in self.aspect_aggregates],
            "tripTypeDistribution": [c.to_dict() for c in self.trip_type_distribution],
            "ratingDistribution": [r.to_dict() for r in self.rating_distribution],
        }


@dataclass
class AspectScore:
    aspect: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"aspect": self.aspect, "score": self.score}


@dataclass
class Trend:
    """Month-over-month change of an overall or per-aspect average."""
    type: str  # "overall" or "aspect"
    month: str
    change: float
    message: str
    aspect: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {"type": self.type, "month": self.month, "change": self.change, "message": self.message}
        if self.aspect is not None:
            out["aspect"] = self.aspect
        return out


@dataclass
class Anomaly:
    """A review aspect score far from that aspect's average elsewhere."""
    date: str
    aspect: str
    score: float
    average_score: float
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "aspect": self.aspect,
            "score": self.score,
            "averageScore": self.average_score,
            "message": self.message,
        }


@dataclass
class Recommendation:
    aspect: str
    score: float
    action: str

    def to_dict(self) -> Dict[str, Any]:
        return {"aspect": self.aspect, "score": self.score, "action": self.action}


@dataclass
class CompetitiveInsights:
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"strengths": list(self.strengths), "weaknesses": list(self.weaknesses)}


@dataclass
class InsightBundle:
    """Higher-level insights derived from a review collection."""
    top_aspects: List[AspectScore] = field(default_factory=list)
    bottom_aspects: List[AspectScore] = field(default_factory=list)
    trends: List[Trend] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)
    anomalies: List[Anomaly] = field(default_factory=list)
    competitive_insights: CompetitiveInsights = field(default_factory=CompetitiveInsights)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topAspects": [a.to_dict() for a in self.top_aspects],
            "bottomAspects": [a.to_dict() for a in self.bottom_aspects],
            "trends": [t.to_dict() for t in self.trends],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "anomalies": [a.to_dict() for a in self.anomalies],
            "competitiveInsights": self.competitive_insights.to_dict(),
        }
