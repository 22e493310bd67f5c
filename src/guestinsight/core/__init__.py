"""Core modules for GuestInsight."""

from .models import *
from .config import settings
from .errors import *
from .lexicon import *
from .sentiment import *
from .aggregation import *
from .insights import *

__all__ = [
    "settings",
    "Review",
    "SentimentResult",
    "DashboardMetrics",
    "InsightBundle",
    "AnalysisFailure",
    "AnalysisResult",
    "FailureKind",
    "Lexicon",
    "HOTEL_LEXICON",
    "AspectExtractor",
    "KeywordSentimentAnalyzer",
    "ReviewAggregator",
    "InsightEngine",
    "AnalysisStrategy",
]
