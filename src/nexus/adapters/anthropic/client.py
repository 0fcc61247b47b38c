"""HTTP client for the Anthropic Messages API."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from nexus.adapters.http_resilience import ResilientClient

from .schema import ErrorResponse, MessagesResponse

if TYPE_CHECKING:
    from types import TracebackType

    from nexus.config.llm import LlmConfig

log = getLogger(__name__)

MESSAGES_PATH = "/v1/messages"


async def _log_response(response: httpx.Response) -> None:
    log.debug(
        "Messages API responded %s (request-id=%s)",
        response.status_code,
        response.headers.get("request-id"),
    )


class AnthropicAPIError(RuntimeError):
    """Raised when the Messages API call fails or returns no usable text."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_type = error_type


class AnthropicMessagesClient:
    """Single-turn text completions over a shared rate-limited connection.

    Use as an async context manager so one limiter covers every call made during
    an operation.
    """

    def __init__(
        self,
        config: LlmConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        resilience = replace(
            config.resilience,
            default_headers={**(config.resilience.default_headers or {}), **self._headers()},
            response_hooks=(*config.resilience.response_hooks, _log_response),
        )
        self._client = ResilientClient(resilience, transport=transport)

    async def __aenter__(self) -> AnthropicMessagesClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def complete(
        self,
        prompt: str,
        *,
        max_tokens: int,
        system: str | None = None,
    ) -> str:
        """Send one user message and return the first text block of the reply."""

        body: dict[str, object] = {
            "model": self.config.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system is not None:
            body["system"] = system

        try:
            response = await self._client.post(MESSAGES_PATH, json=body)
        except httpx.HTTPError as exc:
            raise AnthropicAPIError(f"Messages request failed: {exc}") from exc

        if response.is_error:
            raise self._error_from_response(response)

        try:
            message = MessagesResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise AnthropicAPIError(
                "Unexpected Messages API response payload", status_code=response.status_code
            ) from exc

        text = message.first_text()
        if text is None:
            raise AnthropicAPIError(
                "Messages API response contained no text content",
                status_code=response.status_code,
            )
        log.debug(
            "Messages API call finished (model=%s, stop_reason=%s)",
            message.model,
            message.stop_reason,
        )
        return text

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "anthropic-version": self.config.anthropic_version,
            "content-type": "application/json",
        }

    @staticmethod
    def _error_from_response(response: httpx.Response) -> AnthropicAPIError:
        try:
            payload = ErrorResponse.model_validate_json(response.content)
        except ValidationError:
            return AnthropicAPIError(
                f"Messages API returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        log.error(f"Messages API error {payload.error.type}: {payload.error.message}")
        return AnthropicAPIError(
            payload.error.message,
            status_code=response.status_code,
            error_type=payload.error.type,
        )
