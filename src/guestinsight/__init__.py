"""GuestInsight - sentiment rollups and insights for guest reviews."""

__version__ = "1.0.0"
__author__ = "GuestInsight Team"

from .core.models import *
from .core.config import settings
from .core.aggregation import aggregate
from .core.insights import derive_insights, AnalysisStrategy
from .core.sentiment import local_analyze_sentiment, extract_aspects
from .services.analysis import AnalysisServiceFactory

__all__ = [
    "settings",
    "aggregate",
    "derive_insights",
    "local_analyze_sentiment",
    "extract_aspects",
    "AnalysisStrategy",
    "AnalysisServiceFactory",
]
