"""OpenAI chat completions provider."""

import os
from collections.abc import AsyncIterator
from typing import Any

import openai
from openai import AsyncOpenAI

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


def _to_openai_message(message: LLMMessage) -> dict[str, str]:
    # Tool results are not tied to a tool_call_id here, so they are passed as context.
    if message.role == "tool":
        return {"role": "system", "content": f"Tool output: {message.content}"}
    return {"role": message.role, "content": message.content}


class OpenAIProvider(LLMProvider):
    """LLM provider backed by the OpenAI API (AsyncOpenAI)."""

    def __init__(
        self,
        api_key: str | None = None,
        config: ProviderConfig | None = None,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            config: Model and sampling parameters
            base_url: Custom API base URL
            client: Preconfigured client, mainly for tests

        Raises:
            AuthenticationError: If no API key is available
        """
        self._config = config or ProviderConfig()
        if client is not None:
            self._client = client
            return

        resolved_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not resolved_key:
            raise AuthenticationError("OPENAI_API_KEY environment variable not set")
        self._client = AsyncOpenAI(
            api_key=resolved_key,
            base_url=base_url,
            timeout=self._config.timeout,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def config(self) -> ProviderConfig:
        return self._config

    def _request_params(self, messages: list[LLMMessage], **kwargs: Any) -> dict[str, Any]:
        cfg = self._config.model_copy(update=kwargs) if kwargs else self._config
        params: dict[str, Any] = {
            "model": cfg.model,
            "messages": [_to_openai_message(m) for m in messages],
            "temperature": cfg.temperature,
        }
        optional = {
            "max_tokens": cfg.max_tokens,
            "top_p": cfg.top_p,
            "frequency_penalty": cfg.frequency_penalty,
            "presence_penalty": cfg.presence_penalty,
        }
        params.update({k: v for k, v in optional.items() if v is not None})
        return params

    async def generate(self, messages: list[LLMMessage], **kwargs: Any) -> LLMResponse:
        params = self._request_params(messages, **kwargs)
        logger.debug(
            "llm_call_start", provider="openai", model=params["model"], messages=len(messages)
        )

        try:
            completion = await self._client.chat.completions.create(**params)
        except openai.APIError as e:
            raise _map_error(e) from e

        choice = completion.choices[0]
        if choice.finish_reason == "content_filter":
            raise ContentFilterError("Response blocked by OpenAI content filter")

        usage = None
        if completion.usage is not None:
            usage = TokenUsage(
                prompt_tokens=completion.usage.prompt_tokens,
                completion_tokens=completion.usage.completion_tokens,
                total_tokens=completion.usage.total_tokens,
            )

        logger.debug(
            "llm_call_complete",
            provider="openai",
            model=completion.model,
            finish_reason=choice.finish_reason,
        )
        return LLMResponse(
            content=choice.message.content or "",
            model=completion.model,
            finish_reason=choice.finish_reason,
            usage=usage,
        )

    async def generate_stream(
        self, messages: list[LLMMessage], **kwargs: Any
    ) -> AsyncIterator[str]:
        params = self._request_params(messages, **kwargs)
        try:
            stream = await self._client.chat.completions.create(**params, stream=True)
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except openai.APIError as e:
            raise _map_error(e) from e


def _map_error(error: openai.APIError) -> ProviderError:
    if isinstance(error, openai.AuthenticationError):
        return AuthenticationError(str(error))
    if isinstance(error, openai.RateLimitError):
        return RateLimitError(str(error))
    if isinstance(error, openai.NotFoundError):
        return ModelError(str(error))
    return ProviderError(f"OpenAI request failed: {error}")
