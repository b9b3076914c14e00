"""Configuration for colloquy.

    from colloquy.config import get_settings

    timeout = get_settings().agent.default_tool_timeout
"""

from functools import lru_cache

from colloquy.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, built on first use."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and read the configuration again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
