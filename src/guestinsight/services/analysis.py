"""Strategy-aware entry points for review and collection analysis."""

import logging
from typing import Optional

from ..core.config import Settings, settings as default_settings
from ..core.errors import AnalysisFailure, AnalysisResult
from ..core.insights import AnalysisStrategy, InsightEngine
from ..core.lexicon import Lexicon, HOTEL_LEXICON
from ..core.models import SentimentResult
from ..core.sentiment import KeywordSentimentAnalyzer
from .llm import AnalysisGateway

logger = logging.getLogger(__name__)


class SentimentService:
    """Analyses one review text with the gateway or the keyword fallback."""

    def __init__(
        self,
        strategy=AnalysisStrategy.LOCAL,
        gateway: Optional[AnalysisGateway] = None,
        analyzer: Optional[KeywordSentimentAnalyzer] = None,
        fallback: bool = True,
    ):
        self.strategy = AnalysisStrategy.parse(strategy)
        self.gateway = gateway
        self.analyzer = analyzer or KeywordSentimentAnalyzer()
        self.fallback = fallback
        if self.strategy is AnalysisStrategy.REMOTE and gateway is None:
            raise ValueError("REMOTE strategy requires a gateway")

    async def analyze(self, text: str, fallback: Optional[bool] = None) -> AnalysisResult[SentimentResult]:
        use_fallback = self.fallback if fallback is None else fallback
        if self.strategy is AnalysisStrategy.LOCAL:
            return AnalysisResult.success(self.analyzer.analyze(text), source="local")

        try:
            result = await self.gateway.analyze_sentiment(text)
        except AnalysisFailure as e:
            if not use_fallback:
                logger.error(f"Sentiment analysis failed: {e}")
                return AnalysisResult.failure(e)
            logger.warning(f"Sentiment analysis failed, using keyword analysis: {e}")
            return AnalysisResult.fallback(self.analyzer.analyze(text), e)
        return AnalysisResult.success(result, source="remote")


class AnalysisServiceFactory:
    """Factory for creating analysis services."""

    @staticmethod
    def resolve_strategy(settings: Settings, strategy=None) -> AnalysisStrategy:
        """Requested strategy, or the configured one; LOCAL when no API key is set."""
        chosen = AnalysisStrategy.parse(strategy or settings.analysis_strategy)
        if chosen is AnalysisStrategy.REMOTE and not settings.effective_api_key:
            logger.warning("No analysis API key configured, using local analysis")
            return AnalysisStrategy.LOCAL
        return chosen

    @staticmethod
    def create_gateway(settings: Optional[Settings] = None) -> AnalysisGateway:
        return AnalysisGateway(settings or default_settings)

    @classmethod
    def create_sentiment_service(
        cls,
        settings: Optional[Settings] = None,
        strategy=None,
        fallback: bool = True,
        lexicon: Lexicon = HOTEL_LEXICON,
    ) -> SentimentService:
        cfg = settings or default_settings
        chosen = cls.resolve_strategy(cfg, strategy)
        gateway = cls.create_gateway(cfg) if chosen is AnalysisStrategy.REMOTE else None
        return SentimentService(chosen, gateway, KeywordSentimentAnalyzer(lexicon), fallback=fallback)

    @classmethod
    def create_insight_engine(
        cls,
        settings: Optional[Settings] = None,
        strategy=None,
        fallback: bool = True,
    ) -> InsightEngine:
        cfg = settings or default_settings
        chosen = cls.resolve_strategy(cfg, strategy)
        gateway = cls.create_gateway(cfg) if chosen is AnalysisStrategy.REMOTE else None
        return InsightEngine(chosen, gateway, fallback=fallback, settings=cfg)
