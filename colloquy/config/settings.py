"""Application settings: code defaults, TOML layers, then COLLOQUY_* env vars."""

from typing import Any

from pydantic import Field
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from colloquy.config.loader import load_config
from colloquy.config.models.agent import AgentConfig
from colloquy.config.models.observability import ObservabilityConfig
from colloquy.config.models.providers import ProvidersConfig


class LayeredTomlSource(PydanticBaseSettingsSource):
    """Reads the merged TOML layers once, when the settings object is built."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._values = load_config()

    def get_field_value(
        self, field: FieldInfo, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = self._values.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {
            name: self._values[name]
            for name in self.settings_cls.model_fields
            if name in self._values
        }


class Settings(BaseSettings):
    """Root configuration.

    Constructor arguments beat ``COLLOQUY_*`` environment variables (nested
    keys joined with ``__``), which beat the TOML layers.
    """

    model_config = SettingsConfigDict(
        env_prefix="COLLOQUY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="colloquy", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")

    agent: AgentConfig = Field(default_factory=AgentConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, LayeredTomlSource(settings_cls))
