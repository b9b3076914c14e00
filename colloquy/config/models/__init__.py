"""Configuration model exports.

    from colloquy.config.models import AgentConfig, ProviderConfig
"""

from colloquy.config.models.agent import DEFAULT_FALLBACK_RESPONSE, AgentConfig
from colloquy.config.models.observability import LoggingConfig, ObservabilityConfig
from colloquy.config.models.providers import (
    EmbeddingProviderConfig,
    LLMProviderConfig,
    ProviderConfig,
    ProvidersConfig,
)

__all__ = [
    "AgentConfig",
    "DEFAULT_FALLBACK_RESPONSE",
    "EmbeddingProviderConfig",
    "LLMProviderConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "ProviderConfig",
    "ProvidersConfig",
]
