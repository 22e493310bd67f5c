"""Tests for the strategy-aware analysis services."""

import asyncio

import pytest

from guestinsight.core.config import Settings
from guestinsight.core.errors import AnalysisFailure, FailureKind
from guestinsight.core.insights import AnalysisStrategy, InsightEngine
from guestinsight.core.lexicon import Lexicon
from guestinsight.core.sentiment import local_analyze_sentiment
from guestinsight.services.analysis import AnalysisServiceFactory, SentimentService
from guestinsight.services.llm import AnalysisGateway

TEXT = "Friendly staff but a noisy room"


class FakeGateway:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def analyze_sentiment(self, text):
        if self.error is not None:
            raise self.error
        return self.result


def _no_key(**overrides):
    return Settings(groq_api_key="", GROQ_API_KEY="", **overrides)


def test_local_service():
    result = asyncio.run(SentimentService().analyze(TEXT))
    assert result.ok
    assert result.source == "local"
    assert result.value == local_analyze_sentiment(TEXT)


def test_remote_service():
    remote = local_analyze_sentiment("Amazing")
    result = asyncio.run(SentimentService("remote", FakeGateway(result=remote)).analyze(TEXT))
    assert result.source == "remote"
    assert result.value is remote


def test_remote_failure_uses_keyword_analysis():
    error = AnalysisFailure(FailureKind.TRANSPORT, "connection refused")
    result = asyncio.run(SentimentService("remote", FakeGateway(error=error)).analyze(TEXT))

    assert result.fallback_used
    assert result.error is error
    assert result.value == local_analyze_sentiment(TEXT)


def test_remote_failure_without_fallback():
    error = AnalysisFailure(FailureKind.UPSTREAM_ERROR, "bad gateway", 502)
    service = SentimentService("remote", FakeGateway(error=error))

    result = asyncio.run(service.analyze(TEXT, fallback=False))

    assert not result.ok
    assert result.value is None
    with pytest.raises(AnalysisFailure):
        result.unwrap()


def test_remote_service_requires_gateway():
    with pytest.raises(ValueError):
        SentimentService(AnalysisStrategy.REMOTE)


def test_no_api_key_resolves_to_local():
    assert AnalysisServiceFactory.resolve_strategy(_no_key(analysis_strategy="remote")) is AnalysisStrategy.LOCAL
    assert AnalysisServiceFactory.resolve_strategy(_no_key(), "local") is AnalysisStrategy.LOCAL


def test_api_key_keeps_remote():
    cfg = Settings(groq_api_key="test-key", analysis_strategy="remote")
    assert AnalysisServiceFactory.resolve_strategy(cfg) is AnalysisStrategy.REMOTE
    assert AnalysisServiceFactory.resolve_strategy(cfg, "local") is AnalysisStrategy.LOCAL


def test_create_insight_engine():
    engine = AnalysisServiceFactory.create_insight_engine(Settings(groq_api_key="test-key", cache_enabled=False))
    assert isinstance(engine, InsightEngine)
    assert engine.strategy is AnalysisStrategy.REMOTE
    assert isinstance(engine.gateway, AnalysisGateway)

    local = AnalysisServiceFactory.create_insight_engine(_no_key(anomaly_threshold=0.5))
    assert local.gateway is None
    assert local.anomaly_threshold == 0.5


def test_create_sentiment_service_with_lexicon():
    spa = Lexicon.build("spa", ["relaxing"], ["cold"], ["sauna"])
    service = AnalysisServiceFactory.create_sentiment_service(_no_key(), lexicon=spa)

    result = asyncio.run(service.analyze("A relaxing sauna"))

    assert service.strategy is AnalysisStrategy.LOCAL
    assert result.value.aspects == ["sauna"]
    assert result.value.score == 0.9
