"""Anthropic Messages API provider over httpx."""

import json
import os
from collections.abc import AsyncIterator
from typing import Any

import httpx

from colloquy.config.models.providers import ProviderConfig
from colloquy.observability.logging import get_logger
from colloquy.providers.llm.base import (
    AuthenticationError,
    ContentFilterError,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ModelError,
    ProviderError,
    RateLimitError,
    TokenUsage,
)

logger = get_logger(__name__)

ANTHROPIC_API_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 1024


class AnthropicProvider(LLMProvider):
    """LLM provider for Claude models.

    The Messages API takes the system prompt as a top-level field, so
    system messages are joined and lifted out of the message list. Tool
    messages are sent as user turns.
    """

    def __init__(
        self,
        api_key: str | None = None,
        config: ProviderConfig | None = None,
        base_url: str = ANTHROPIC_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize Anthropic provider.

        Args:
            api_key: API key (defaults to ANTHROPIC_API_KEY env var)
            config: Model and sampling parameters
            base_url: API base URL
            transport: Custom httpx transport, mainly for tests

        Raises:
            AuthenticationError: If no API key is available
        """
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise AuthenticationError("ANTHROPIC_API_KEY environment variable not set")
        self._config = config or ProviderConfig(model="claude-3-5-haiku-latest")
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def config(self) -> ProviderConfig:
        return self._config

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key or "",
            "content-type": "application/json",
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def build_payload(self, messages: list[LLMMessage], **kwargs: Any) -> dict[str, Any]:
        """Translate messages and config into a Messages API request body."""
        cfg = self._config.model_copy(update=kwargs) if kwargs else self._config

        system_parts = [m.content for m in messages if m.role == "system"]
        turns = [
            {"role": "assistant" if m.role == "assistant" else "user", "content": m.content}
            for m in messages
            if m.role != "system"
        ]

        payload: dict[str, Any] = {
            "model": cfg.model,
            "max_tokens": cfg.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": turns,
            # Anthropic accepts temperature in 0..1
            "temperature": min(cfg.temperature, 1.0),
        }
        if system_parts:
            payload["system"] = "\n\n".join(system_parts)
        if cfg.top_p is not None:
            payload["top_p"] = cfg.top_p
        return payload

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport)

    async def generate(self, messages: list[LLMMessage], **kwargs: Any) -> LLMResponse:
        payload = self.build_payload(messages, **kwargs)
        logger.debug(
            "llm_call_start", provider="anthropic", model=payload["model"], messages=len(messages)
        )

        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self._base_url}/messages",
                    headers=self._headers(),
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise _map_status_error(e) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Anthropic request failed: {e}") from e

        stop_reason = data.get("stop_reason")
        if stop_reason == "refusal":
            raise ContentFilterError("Response refused by Anthropic safety filter")

        content = "".join(
            block.get("text", "")
            for block in data.get("content", [])
            if block.get("type") == "text"
        )
        raw_usage = data.get("usage", {})
        input_tokens = raw_usage.get("input_tokens", 0)
        output_tokens = raw_usage.get("output_tokens", 0)

        logger.debug(
            "llm_call_complete",
            provider="anthropic",
            model=data.get("model", payload["model"]),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
        return LLMResponse(
            content=content,
            model=data.get("model", payload["model"]),
            finish_reason=stop_reason,
            usage=TokenUsage(
                prompt_tokens=input_tokens,
                completion_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            ),
        )

    async def generate_stream(
        self, messages: list[LLMMessage], **kwargs: Any
    ) -> AsyncIterator[str]:
        payload = self.build_payload(messages, **kwargs)
        payload["stream"] = True

        try:
            async with self._client() as client:
                async with client.stream(
                    "POST",
                    f"{self._base_url}/messages",
                    headers=self._headers(),
                    json=payload,
                ) as response:
                    if response.is_error:
                        await response.aread()
                        response.raise_for_status()
                    async for line in response.aiter_lines():
                        if not line.startswith("data:"):
                            continue
                        event = json.loads(line[len("data:") :].strip())
                        if event.get("type") == "content_block_delta":
                            text = event.get("delta", {}).get("text")
                            if text:
                                yield text
        except httpx.HTTPStatusError as e:
            raise _map_status_error(e) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Anthropic request failed: {e}") from e


def _map_status_error(error: httpx.HTTPStatusError) -> ProviderError:
    status = error.response.status_code
    detail = error.response.text
    if status in (401, 403):
        return AuthenticationError(f"Anthropic rejected credentials: {detail}")
    if status == 429:
        return RateLimitError(f"Anthropic rate limit exceeded: {detail}")
    if status == 404:
        return ModelError(f"Anthropic model not found: {detail}")
    return ProviderError(f"Anthropic API error {status}: {detail}")
