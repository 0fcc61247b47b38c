"""Public interface for the Anthropic Messages API adapter."""

from __future__ import annotations

from .advisor import LlmPortfolioAdvisor
from .client import AnthropicAPIError, AnthropicMessagesClient
from .explainer import LlmChangeSummarizer, LlmConflictExplainer
from .extractor import LlmProjectExtractor
from .translator import extract_json_text, parse_extraction, parse_quick_update

__all__ = [
    "AnthropicAPIError",
    "AnthropicMessagesClient",
    "LlmChangeSummarizer",
    "LlmConflictExplainer",
    "LlmPortfolioAdvisor",
    "LlmProjectExtractor",
    "extract_json_text",
    "parse_extraction",
    "parse_quick_update",
]
