"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .ingest import IngestConfig, NameMatching, get_ingest_config
from .llm import LlmConfig, get_llm_config
from .logging import configure_logging
from .storage import StorageConfig, WritePolicy, get_storage_config

__all__ = [
    "ConfigurationError",
    "IngestConfig",
    "LlmConfig",
    "MissingConfigurationError",
    "NameMatching",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "WritePolicy",
    "configure_logging",
    "get_ingest_config",
    "get_llm_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
