"""Services for GuestInsight."""

from .llm import AnalysisGateway
from .analysis import AnalysisServiceFactory, SentimentService

__all__ = [
    "AnalysisGateway",
    "AnalysisServiceFactory",
    "SentimentService",
]
