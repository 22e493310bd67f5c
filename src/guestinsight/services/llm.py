"""Analysis gateway for an OpenAI-compatible chat completions API (Groq by default)."""

import hashlib
import json
import logging
import re
from textwrap import dedent
from typing import Any, Dict, List, Optional, Sequence

import openai
from diskcache import Cache
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..core.config import Settings, settings as default_settings
from ..core.constants import CacheConstants, PromptConstants
from ..core.errors import AnalysisFailure, FailureKind
from ..core.models import InsightBundle, Review, SentimentResult
from .schemas import InsightPayload, SentimentPayload

logger = logging.getLogger(__name__)

SENTIMENT_PROMPT = dedent("""
Analyze the following hotel review and provide a detailed sentiment analysis:

Review: "{review}"

Please provide the following in your response as a JSON object:
- score: A score from 0 to 1 where 0 is completely negative and 1 is completely positive
- estimatedRating: An estimated star rating from 1 to 5
- aspects: An array of identified aspects (e.g., service, room, food, etc.)
- aspectScores: An object with scores for each aspect from 0 to 1
- keywords: An object with "positive" and "negative" arrays of keywords from the review
- summary: A brief summary of the review

Response format example:
{{
  "score": 0.85,
  "estimatedRating": 4,
  "aspects": ["service", "room", "location"],
  "aspectScores": {{"service": 0.9, "room": 0.8, "location": 0.95}},
  "keywords": {{"positive": ["incredible", "amazing", "comfortable"], "negative": ["expensive"]}},
  "summary": "The guest had an excellent stay with exceptional service, though found the pricing to be high."
}}

Only return the JSON, nothing else.
""").strip()

INSIGHTS_PROMPT = dedent("""
Based on the following summary of {count} hotel reviews, provide business insights:

{reviews}

Please provide the following in your response as a JSON object:
- topAspects: Array of top 3 performing aspects with scores
- bottomAspects: Array of bottom 3 performing aspects with scores
- trends: Array of identified trends in sentiment over time
- recommendations: Array of actionable recommendations based on the reviews
- anomalies: Array of any anomalies or outliers in the reviews
- competitiveInsights: Analysis of how this hotel might compare to competitors

Response format example:
{{
  "topAspects": [{{"aspect": "service", "score": 0.92}}],
  "bottomAspects": [{{"aspect": "value", "score": 0.65}}],
  "trends": [{{"type": "overall", "month": "2023-12", "change": 0.06, "message": "Overall sentiment increased by 6.0% in Dec 2023"}}],
  "recommendations": [{{"aspect": "food", "score": 0.74, "action": "Review restaurant menus and consider bringing in a consulting chef to refresh offerings."}}],
  "anomalies": [{{"date": "2024-02-05", "aspect": "service", "score": 0.45, "averageScore": 0.82, "message": "Unexpected low rating for service"}}],
  "competitiveInsights": {{
    "strengths": ["Location and natural setting consistently rated higher than competitors"],
    "weaknesses": ["Value perception lags behind direct competitors with similar price points"]
  }}
}}

Only return the JSON, nothing else.
""").strip()


def _strip_code_fences(s: str) -> str:
    s = s.strip()
    return re.sub(r"^```(?:json)?|```$", "", s, flags=re.IGNORECASE | re.MULTILINE).strip()


def parse_json_object(content: str) -> Dict[str, Any]:
    """Parse a JSON object from a model reply, tolerating code fences and stray prose."""
    cleaned = _strip_code_fences(content or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        # last-ditch: first {...} block
        m = re.search(r"\{.*\}", cleaned, re.S)
        if not m:
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE, f"Response is not JSON: {cleaned[:200]}")
        try:
            data = json.loads(m.group(0))
        except json.JSONDecodeError as e:
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE, f"Response is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE, f"Expected a JSON object, got {type(data).__name__}")
    return data


def review_summary(reviews: Sequence[Review]) -> List[Dict[str, Any]]:
    """Compact per-review payload sent for batch insight generation."""
    return [
        {
            "id": r.id,
            "overallSentiment": r.overall_sentiment,
            "rating": r.rating,
            "aspects": list(r.sentiment_by_aspect.keys()),
            "aspectScores": dict(r.sentiment_by_aspect),
            "date": r.date,
            "tripType": r.trip_type,
        }
        for r in reviews
    ]


class AnalysisGateway:
    """Asks the analysis API for review sentiment and collection insights.

    Every call is independent: no de-duplication, queueing or timeout is
    applied here. Responses are validated before use; any problem is raised
    as an ``AnalysisFailure``.
    """

    def __init__(self, settings: Optional[Settings] = None, client=None, cache=None):
        self.settings = settings or default_settings
        self.model = self.settings.analysis_model
        self.client = client
        if self.client is None and self.settings.effective_api_key:
            self.client = openai.AsyncOpenAI(
                api_key=self.settings.effective_api_key,
                base_url=self.settings.analysis_base_url,
                max_retries=0,  # retries are handled by tenacity below
            )
        self.cache = cache
        if self.cache is None and self.settings.cache_enabled:
            self.cache = Cache(self.settings.cache_dir)
        logger.info(f"Analysis gateway initialized for model {self.model}")

    def _cache_key(self, prompt: str, temperature: float, max_tokens: int, version: str) -> str:
        return hashlib.md5(f"{self.model}|{prompt}|{temperature}|{max_tokens}|{version}".encode()).hexdigest()

    async def _request(self, prompt: str, temperature: float, max_tokens: int) -> str:
        """Single chat completion call, with client errors mapped to failure kinds."""
        if self.client is None:
            raise AnalysisFailure(FailureKind.TRANSPORT, "No analysis API key configured")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": PromptConstants.SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.RateLimitError as e:
            raise AnalysisFailure(FailureKind.RATE_LIMITED, "Analysis API rate limit reached", e.status_code) from e
        except openai.APIStatusError as e:
            raise AnalysisFailure(FailureKind.UPSTREAM_ERROR, f"Analysis API error: {e.message}", e.status_code) from e
        except openai.APIConnectionError as e:
            raise AnalysisFailure(FailureKind.TRANSPORT, f"Could not reach analysis API: {e}") from e
        except openai.APIError as e:
            raise AnalysisFailure(
                FailureKind.UPSTREAM_ERROR, f"Analysis API error: {e.message}", getattr(e, "status_code", None)
            ) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE, "Response has no message content") from e
        if not content:
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE, "Response has empty message content")
        return content

    async def _complete(self, prompt: str, temperature: float, max_tokens: int, version: str, schema):
        """Request, parse and validate one completion, retrying transient failures."""
        cache_key = self._cache_key(prompt, temperature, max_tokens, version)
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached:
                logger.debug(f"Cache hit for analysis request: {cache_key[:CacheConstants.CACHE_KEY_LENGTH]}...")
                return self._validate(cached, schema)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.max_retries)),
            wait=wait_exponential(multiplier=self.settings.retry_delay, max=self.settings.retry_backoff * 10),
            retry=retry_if_exception(lambda e: isinstance(e, AnalysisFailure) and e.retryable),
            before_sleep=lambda state: logger.warning(
                f"Analysis attempt {state.attempt_number} failed: {state.outcome.exception()}. Retrying..."
            ),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    content = await self._request(prompt, temperature, max_tokens)
        except AnalysisFailure as e:
            logger.error(f"Analysis request failed: {e}")
            raise

        payload = self._validate(content, schema)
        if self.cache is not None:
            self.cache.set(cache_key, content, expire=3600 * self.settings.cache_ttl_hours)
            logger.debug(f"Cached analysis response: {cache_key[:CacheConstants.CACHE_KEY_LENGTH]}...")
        return payload

    @staticmethod
    def _validate(content: str, schema):
        data = parse_json_object(content)
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise AnalysisFailure(
                FailureKind.MALFORMED_RESPONSE,
                f"Response does not match {schema.__name__}: {e.error_count()} validation errors",
            ) from e

    async def analyze_sentiment(self, text: str) -> SentimentResult:
        """Sentiment analysis of one review text."""
        payload = await self._complete(
            SENTIMENT_PROMPT.format(review=text),
            self.settings.sentiment_temperature,
            self.settings.sentiment_max_tokens,
            PromptConstants.SENTIMENT_PROMPT_VERSION,
            SentimentPayload,
        )
        return payload.to_result()

    async def generate_insights(self, reviews: Sequence[Review]) -> InsightBundle:
        """Business insights for a review collection."""
        summary = review_summary(reviews)
        payload = await self._complete(
            INSIGHTS_PROMPT.format(count=len(summary), reviews=json.dumps(summary, ensure_ascii=False)),
            self.settings.insights_temperature,
            self.settings.insights_max_tokens,
            PromptConstants.INSIGHTS_PROMPT_VERSION,
            InsightPayload,
        )
        bundle = payload.to_bundle()
        logger.info(f"Received insights for {len(summary)} reviews: {len(bundle.trends)} trends")
        return bundle

    async def close(self) -> None:
        if self.client is not None and hasattr(self.client, "close"):
            await self.client.close()
