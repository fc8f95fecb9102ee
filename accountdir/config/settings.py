"""Root settings model for account directory configuration."""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from accountdir.config.models.accounts import AccountsConfig
from accountdir.config.models.api import APIConfig
from accountdir.config.models.observability import ObservabilityConfig
from accountdir.config.models.storage import StorageConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# TOML config read by TomlConfigSettingsSource
_toml_config: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Set the TOML configuration to be used by Settings."""
    global _toml_config
    _toml_config = config


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that reads from the loaded TOML configuration."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return _toml_config.copy()


class Settings(BaseSettings):
    """Root configuration object.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{ACCOUNTDIR_ENV}.toml (environment overrides)
    4. ACCOUNTDIR_* environment variables (runtime overrides)
    """

    model_config = SettingsConfigDict(
        env_prefix="ACCOUNTDIR_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="accountdir", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default="INFO", description="Logging level")

    api: APIConfig = Field(default_factory=APIConfig, description="HTTP server configuration")
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Document store configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Logging configuration",
    )
    accounts: AccountsConfig = Field(
        default_factory=AccountsConfig,
        description="Directory behaviour",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: constructor arguments, then environment, then TOML."""
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )
