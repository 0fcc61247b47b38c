"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment value (store path, write policy, pacing) could not be used."""


class MissingConfigurationError(ConfigurationError):
    """A required variable such as ``ANTHROPIC_API_KEY`` is unset or blank."""
