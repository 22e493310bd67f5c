"""Configuration management for GuestInsight."""

from pydantic_settings import BaseSettings
from pydantic import Field

from .constants import InsightConstants


class Settings(BaseSettings):
    """Application settings."""

    # Analysis API (OpenAI-compatible, Groq by default)
    groq_api_key: str = Field("", description="Groq API key")
    GROQ_API_KEY: str = Field("", description="Groq API key (alternative naming)")
    analysis_base_url: str = Field("https://api.groq.com/openai/v1", description="Chat completions base URL")
    analysis_model: str = Field("llama3-70b-8192", description="Model used for review analysis")

    @property
    def effective_api_key(self) -> str:
        """Get the effective API key from either field."""
        return self.groq_api_key or self.GROQ_API_KEY

    # Request tuning
    sentiment_temperature: float = Field(0.3, description="Temperature for single-review analysis")
    insights_temperature: float = Field(0.4, description="Temperature for batch insight generation")
    sentiment_max_tokens: int = Field(1024, description="Max tokens for single-review analysis")
    insights_max_tokens: int = Field(2048, description="Max tokens for batch insight generation")

    # Strategy and thresholds
    analysis_strategy: str = Field("remote", description="remote or local")
    anomaly_threshold: float = Field(
        InsightConstants.DEFAULT_ANOMALY_THRESHOLD,
        description="Absolute deviation from an aspect's average that counts as an anomaly",
    )
    recommendation_threshold: float = Field(
        InsightConstants.DEFAULT_RECOMMENDATION_THRESHOLD,
        description="Aspects scoring below this receive a recommendation",
    )

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    # Retry settings
    max_retries: int = Field(3, description="Maximum retry attempts")
    retry_delay: float = Field(1.0, description="Base retry delay in seconds")
    retry_backoff: float = Field(2.0, description="Retry backoff multiplier")

    # Response cache
    cache_enabled: bool = Field(False, description="Cache validated API responses on disk")
    cache_dir: str = Field(".cache/analysis", description="Response cache directory")
    cache_ttl_hours: int = Field(24, description="Response cache time-to-live in hours")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
