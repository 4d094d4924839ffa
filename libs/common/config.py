"""Configuration management for the intent search services.

This module centralizes environment-driven configuration for the search
service and its embedding adapter. It builds on ``pydantic-settings`` so
configuration can be provided via environment variables, ``.env`` files, or
defaults.

Highlights
- Strongly‑typed settings with sensible defaults
- One place to discover commonly used environment variables
- Small service‑specific subclasses to keep concerns clear

Usage
- Inject the appropriate config in your service entrypoint:
  ``config = SearchConfig()``
- Or select dynamically: ``config = get_config("search")``
"""

from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class for all services.

    Parameters are read from the process environment with the field names
    upper‑cased (``ml_log_level`` -> ``ML_LOG_LEVEL``).

    Notes
    - Add new shared settings here so downstream services inherit them.
    - Prefer a typed field over reading ``os.environ`` directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ml_env: str = Field(default="local", description="Deployment environment name")

    # Logging
    ml_log_level: str = Field(default="INFO", description="Root log level")
    ml_log_format: str = Field(default="json", description="json or console")

    @field_validator("ml_log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if value.upper() not in valid_levels:
            raise ValueError(f"ml_log_level must be one of {sorted(valid_levels)}, got {value}")
        return value.upper()


class EmbeddingConfig(BaseConfig):
    """Configuration for the embedding provider adapter.

    Provider credentials are explicit settings rather than process‑wide
    globals; the legacy ``OPENAI_API_KEY`` / ``HUGGINGFACE_API_KEY`` names are
    accepted as aliases.
    """

    ml_embedding_providers: str = Field(
        default="openai,huggingface",
        description="Comma-separated provider names in priority order",
    )
    ml_embedding_timeout_seconds: float = Field(default=10.0, gt=0)
    ml_embedding_failure_threshold: int = Field(default=5, ge=1)
    ml_embedding_recovery_timeout: float = Field(default=30.0, ge=0)

    ml_openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ml_openai_api_key", "openai_api_key"),
    )
    ml_openai_embedding_model: str = Field(default="text-embedding-3-small")
    ml_openai_base_url: str = Field(default="https://api.openai.com/v1")

    ml_huggingface_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ml_huggingface_api_key", "huggingface_api_key"),
    )
    ml_huggingface_model: str = Field(default="sentence-transformers/all-MiniLM-L6-v2")
    ml_huggingface_base_url: str = Field(default="https://api-inference.huggingface.co")

    @property
    def provider_names(self) -> List[str]:
        """Provider names in priority order, blanks dropped."""
        return [
            name.strip().lower()
            for name in self.ml_embedding_providers.split(",")
            if name.strip()
        ]


class SearchConfig(EmbeddingConfig):
    """Configuration for the search service.

    Ranking constants are tunable here; the defaults mirror the values the
    intent search has always shipped with.
    """

    ml_search_port: int = Field(default=9007, ge=1, le=65535)
    ml_search_semantic_threshold: float = Field(default=0.3)
    ml_search_word_overlap_weight: float = Field(default=0.7)
    ml_search_lexical_weight: float = Field(default=0.3)
    ml_search_max_candidates: int = Field(default=10, ge=1)
    ml_search_default_page_size: int = Field(default=10, ge=1)
    ml_search_active_only: bool = Field(default=True)
    ml_search_corpus_path: Optional[str] = Field(
        default=None,
        description="JSON corpus file; the seed intents are served when unset",
    )

    @field_validator(
        "ml_search_semantic_threshold",
        "ml_search_word_overlap_weight",
        "ml_search_lexical_weight",
    )
    @classmethod
    def _check_unit_interval(cls, value: float, info) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{info.field_name} must be in [0.0, 1.0], got {value}")
        return value

    @model_validator(mode="after")
    def _check_weight_sum(self) -> "SearchConfig":
        weight_sum = self.ml_search_word_overlap_weight + self.ml_search_lexical_weight
        # tolerance for float rounding
        if weight_sum > 1.0 + 1e-9:
            raise ValueError(
                "ml_search_word_overlap_weight + ml_search_lexical_weight must not exceed 1.0, "
                f"got {weight_sum}"
            )
        return self


def get_config(service_name: str) -> BaseConfig:
    """Get configuration for a specific service.

    Parameters
    - service_name: Literal name: ``embedding`` or ``search``.

    Returns
    - A concrete ``BaseConfig`` subclass pre‑wired to read the right env vars.
    """
    config_map = {
        "embedding": EmbeddingConfig,
        "search": SearchConfig,
    }

    # Default to ``BaseConfig`` to avoid surprising crashes for unknown names.
    config_class = config_map.get(service_name, BaseConfig)
    return config_class()
