"""Configuration and settings for the menu parser.

Uses Pydantic Settings for fail-fast validation on startup.
All required environment variables are validated when settings are first loaded.
"""

import logging
import sys
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Raises ValidationError on startup if required variables are missing.
    """

    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Keys (required)
    anthropic_api_key: str = Field(..., description="Anthropic API key for Claude")

    # Application Settings
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # Document Limits
    max_file_size_mb: int = Field(default=10, description="Max upload size in MB")
    min_text_chars: int = Field(
        default=10, description="Minimum extracted characters for a readable menu"
    )

    # LLM Settings
    llm_model: str = Field(
        default="claude-sonnet-4-20250514", description="Claude model for extraction"
    )
    llm_timeout: float = Field(
        default=120.0, description="Per-call timeout for the extraction service (s)"
    )
    llm_connect_timeout: float = Field(
        default=10.0, description="Connection timeout for the extraction service (s)"
    )
    llm_temperature: float = Field(
        default=0.1, description="Low temperature for consistent extraction"
    )
    llm_max_tokens: int = Field(
        default=32768, description="Max output tokens for single-pass extraction"
    )
    llm_chunk_max_tokens: int = Field(
        default=16384, description="Max output tokens for a chunked extraction call"
    )

    # Retry Settings
    retry_attempts: int = Field(default=3, description="Attempts for single-pass calls")
    retry_base_delay: float = Field(default=2.0, description="First backoff delay (s)")
    retry_multiplier: float = Field(default=2.0, description="Backoff multiplier")
    chunk_retry_attempts: int = Field(default=2, description="Attempts per chunk call")
    chunk_retry_base_delay: float = Field(
        default=1.5, description="First backoff delay for chunk calls (s)"
    )
    chunk_retry_multiplier: float = Field(
        default=1.5, description="Backoff multiplier for chunk calls"
    )

    # Chunking Settings
    chunking_length_threshold: int = Field(
        default=12000, description="Text length that always triggers chunking"
    )
    large_document_threshold: int = Field(
        default=4000, description="Text length that selects forced section chunking"
    )
    forced_chunk_size: int = Field(
        default=1800, description="Target chunk size for large documents (chars)"
    )
    page_chunk_size: int = Field(
        default=2500, description="Target chunk size for page-based chunking (chars)"
    )
    min_chunk_chars: int = Field(
        default=50, description="Chunks shorter than this are discarded as noise"
    )
    min_page_chars: int = Field(
        default=100, description="Page sections shorter than this are skipped"
    )
    boundary_search_ratio: float = Field(
        default=0.7, description="Newline search starts at this fraction of a slice"
    )
    inter_chunk_delay: float = Field(
        default=1.0, description="Delay between chunk calls to respect rate limits (s)"
    )

    # Chunked-vs-single-pass preference thresholds
    prefer_chunked_min_wines: int = Field(default=28, description="Wine count")
    prefer_chunked_min_foods: int = Field(default=25, description="Food count")
    prefer_chunked_min_beverages: int = Field(default=15, description="Beverage count")
    prefer_chunked_min_total: int = Field(default=40, description="Total item count")

    # Validation
    min_item_confidence: int = Field(
        default=30, description="Items below this confidence are dropped"
    )

    # Enrichment Settings
    enable_wine_enrichment: bool = Field(default=True, description="Grape pass")
    enable_food_enrichment: bool = Field(default=True, description="Food pass")
    enable_beverage_enrichment: bool = Field(default=True, description="Beverage pass")
    grape_max_ai_calls: int = Field(
        default=5, description="Max service calls per grape identification batch"
    )
    food_enhancement_delay: float = Field(
        default=2.0, description="Delay between food enhancement calls (s)"
    )
    beverage_batch_size: int = Field(
        default=10, description="Beverages analysed per service call"
    )
    beverage_batch_delay: float = Field(
        default=2.0, description="Delay between beverage batches (s)"
    )
    enrichment_max_tokens: int = Field(
        default=8192, description="Max output tokens for enrichment calls"
    )

    @field_validator("anthropic_api_key")
    @classmethod
    def validate_api_key_not_empty(cls, v: str, info) -> str:
        """Ensure API keys are not empty strings."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty")
        return v.strip()

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
