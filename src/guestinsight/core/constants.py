"""Constants and configuration values for GuestInsight."""

# Scoring Constants
class ScoringConstants:
    """Constants for the keyword sentiment fallback."""

    NEUTRAL_SCORE = 0.5  # score when no keyword hits occur
    MIN_SCORE = 0.1  # lower clamp for keyword ratios
    MAX_SCORE = 0.9  # upper clamp for keyword ratios
    MIN_RATING = 1
    MAX_RATING = 5
    ASPECT_CONTEXT_CHARS = 10  # characters on each side of an aspect mention
    SCORE_DECIMALS = 2

    # Summary label thresholds
    EXTREMELY_POSITIVE = 0.8
    POSITIVE = 0.6
    NEGATIVE = 0.4
    VERY_NEGATIVE = 0.2

    # Aspect thresholds for the summary sentence
    APPRECIATED_ASPECT = 0.6
    CONCERN_ASPECT = 0.4


# Insight Constants
class InsightConstants:
    """Constants for insight derivation."""

    TOP_ASPECT_COUNT = 3
    BOTTOM_ASPECT_COUNT = 3
    DEFAULT_ANOMALY_THRESHOLD = 0.3  # absolute deviation on the 0-1 scale
    DEFAULT_RECOMMENDATION_THRESHOLD = 0.75  # aspects strictly below get an action
    CHANGE_DECIMALS = 4

    MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                   "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    # Display labels used by the review list and analyzer views
    SENTIMENT_LABELS = [
        (0.8, "Very Positive"),
        (0.6, "Positive"),
        (0.4, "Neutral"),
        (0.2, "Negative"),
    ]
    LOWEST_SENTIMENT_LABEL = "Very Negative"


# Prompt Constants
class PromptConstants:
    """Constants for LLM prompts and templates."""

    # Prompt versions (for cache invalidation)
    SENTIMENT_PROMPT_VERSION = "v1.2"
    INSIGHTS_PROMPT_VERSION = "v1.1"

    SYSTEM_PROMPT = (
        "You are an AI assistant that specializes in sentiment analysis and "
        "hospitality insights. Provide detailed, accurate, and helpful analysis."
    )


# Cache Constants
class CacheConstants:
    """Constants for caching behavior."""

    CACHE_KEY_LENGTH = 8  # length of cache key for logging


# File and Path Constants
class FileConstants:
    """Constants for file operations."""

    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    JSON_INDENT = 2


# Review Defaults
class ReviewConstants:
    """Defaults applied when a review is created from an analysis."""

    DEFAULT_TRIP_TYPE = "Leisure"
    DEFAULT_COUNTRY = ""
    DEFAULT_REVIEWER = "Anonymous"
    ALL_FILTER = "all"
