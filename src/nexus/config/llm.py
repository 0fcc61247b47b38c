"""Language-model endpoint configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int, optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_ANTHROPIC_BASE_URL = "https://api.anthropic.com"
DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_LLM_MODEL = "claude-sonnet-4-5"
LLM_TIMEOUT_SECONDS = 120.0

EXTRACTION_MAX_TOKENS = 8192
QUICK_UPDATE_MAX_TOKENS = 2048
EXPLANATION_MAX_TOKENS = 512
SUMMARY_MAX_TOKENS = 256
ADVICE_MAX_TOKENS = 4096


@dataclass(frozen=True, slots=True)
class LlmConfig:
    """Holds the Messages API credentials, model and transport settings."""

    api_key: str
    model: str
    resilience: ResilienceConfig
    anthropic_version: str = DEFAULT_ANTHROPIC_VERSION


def get_llm_config(*, resilience: ResilienceConfig | None = None) -> LlmConfig:
    values = require_env_vars(("ANTHROPIC_API_KEY",))
    base_url = optional_env_var("NEXUS_LLM_BASE_URL") or DEFAULT_ANTHROPIC_BASE_URL
    max_retries = env_int("NEXUS_LLM_MAX_RETRIES", 0, minimum=0)
    return LlmConfig(
        api_key=values["ANTHROPIC_API_KEY"],
        model=optional_env_var("NEXUS_LLM_MODEL") or DEFAULT_LLM_MODEL,
        resilience=resilience
        or ResilienceConfig(
            name="anthropic",
            base_url=base_url,
            timeout_seconds=LLM_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=max_retries),
            ratelimit=RateLimit(max_calls=1, per_seconds=3.0),
        ),
    )
