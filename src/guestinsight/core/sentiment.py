"""Keyword-based sentiment fallback and aspect extraction."""

import logging
import re
from typing import Dict, List, Optional, Tuple

from .constants import ScoringConstants
from .lexicon import Lexicon, HOTEL_LEXICON
from .models import Keywords, SentimentResult, round_half_up

logger = logging.getLogger(__name__)

_WORD = re.compile(r"\b\w+\b")


def tokenize(text: str) -> List[str]:
    """Lower-cased word tokens."""
    return _WORD.findall((text or "").lower())


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def keyword_ratio(pos: int, neg: int) -> float:
    """Share of positive hits, clamped; neutral when there are no hits."""
    if pos == 0 and neg == 0:
        return ScoringConstants.NEUTRAL_SCORE
    return _clamp(pos / (pos + neg), ScoringConstants.MIN_SCORE, ScoringConstants.MAX_SCORE)


def estimate_rating(score: float) -> int:
    """Map a 0-1 score to a 1-5 star estimate."""
    return max(ScoringConstants.MIN_RATING, min(ScoringConstants.MAX_RATING, round_half_up(score * 5)))


def summary_label(score: float) -> str:
    if score >= ScoringConstants.EXTREMELY_POSITIVE:
        return "extremely positive"
    if score >= ScoringConstants.POSITIVE:
        return "positive"
    if score <= ScoringConstants.VERY_NEGATIVE:
        return "very negative"
    if score <= ScoringConstants.NEGATIVE:
        return "negative"
    return "neutral"


class AspectExtractor:
    """Detects which vocabulary aspects a text mentions."""

    def __init__(self, lexicon: Lexicon = HOTEL_LEXICON):
        self.lexicon = lexicon
        self._patterns = [
            (aspect, re.compile(rf"\b{re.escape(aspect)}\b", re.IGNORECASE))
            for aspect in lexicon.aspects
        ]

    def extract(self, text: str) -> List[str]:
        """Aspects mentioned as whole words, in vocabulary order."""
        if not text:
            return []
        return [aspect for aspect, pattern in self._patterns if pattern.search(text)]


class KeywordSentimentAnalyzer:
    """Rule-based sentiment used when the analysis API is unavailable."""

    def __init__(self, lexicon: Lexicon = HOTEL_LEXICON, extractor: Optional[AspectExtractor] = None):
        self.lexicon = lexicon
        self.extractor = extractor or AspectExtractor(lexicon)

    def _hits(self, tokens: List[str]) -> Tuple[List[str], List[str]]:
        positive = [t for t in tokens if self.lexicon.is_positive(t)]
        negative = [t for t in tokens if self.lexicon.is_negative(t)]
        return positive, negative

    def _aspect_score(self, text: str, aspect: str, overall: float) -> float:
        lowered = text.lower()
        index = lowered.find(aspect)
        if index == -1:
            return overall
        window = ScoringConstants.ASPECT_CONTEXT_CHARS
        start = max(0, index - window)
        end = min(len(text), index + len(aspect) + window)
        positive, negative = self._hits(tokenize(lowered[start:end]))
        if not positive and not negative:
            return overall
        return keyword_ratio(len(positive), len(negative))

    def summarize(self, score: float, aspect_scores: Dict[str, float]) -> str:
        """One to three sentence summary of the review's tone."""
        summary = f"The review is generally {summary_label(score)}."
        if not aspect_scores:
            return summary

        # max/min keep the first of equal scores
        best = max(aspect_scores, key=aspect_scores.get)
        worst = min(aspect_scores, key=aspect_scores.get)
        if aspect_scores[best] >= ScoringConstants.APPRECIATED_ASPECT:
            summary += f" The guest particularly appreciated the {best}."
        if aspect_scores[worst] <= ScoringConstants.CONCERN_ASPECT:
            summary += f" However, there were concerns about the {worst}."
        return summary

    def analyze(self, text: str) -> SentimentResult:
        """Score a review text from keyword hits."""
        text = text or ""
        positive, negative = self._hits(tokenize(text))
        score = keyword_ratio(len(positive), len(negative))

        aspects = self.extractor.extract(text)
        aspect_scores = {aspect: self._aspect_score(text, aspect, score) for aspect in aspects}

        logger.debug(f"Keyword analysis: {len(positive)} positive, {len(negative)} negative, {len(aspects)} aspects")
        return SentimentResult(
            score=round(score, ScoringConstants.SCORE_DECIMALS),
            estimated_rating=estimate_rating(score),
            aspects=aspects,
            aspect_scores=aspect_scores,
            keywords=Keywords(positive=positive, negative=negative),
            summary=self.summarize(score, aspect_scores),
        )


_default_extractor = AspectExtractor()
_default_analyzer = KeywordSentimentAnalyzer(extractor=_default_extractor)


def extract_aspects(text: str, lexicon: Optional[Lexicon] = None) -> List[str]:
    """Aspects mentioned in text (default hotel vocabulary)."""
    if lexicon is None:
        return _default_extractor.extract(text)
    return AspectExtractor(lexicon).extract(text)


def local_analyze_sentiment(text: str, lexicon: Optional[Lexicon] = None) -> SentimentResult:
    """Keyword fallback analysis of one review text."""
    if lexicon is None:
        return _default_analyzer.analyze(text)
    return KeywordSentimentAnalyzer(lexicon).analyze(text)
