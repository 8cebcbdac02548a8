"""YAML + env var config loading with pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


class EditorSettings(BaseSettings):
    """Editor configuration loaded from YAML defaults, overridden by env vars."""

    model_config = SettingsConfigDict(
        env_prefix="CSP_EDITOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        yaml_file=_DEFAULTS_PATH,
    )

    # Response header the policy is read from (matched case-insensitively)
    header_name: str = "content-security-policy"
    output_file: str = "generated_csp.txt"

    # HTTP client settings
    request_timeout: float = 10.0
    follow_redirects: bool = True
    user_agent: str = "csp-editor/0.1"

    log_level: str = "warning"
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Earlier sources win: explicit overrides, then env, then YAML defaults
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )


_settings: EditorSettings | None = None


def get_settings() -> EditorSettings:
    """Get or create the singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def load_settings(**overrides: Any) -> EditorSettings:
    """Load settings, applying non-None keyword overrides (e.g. from the CLI)."""
    global _settings
    _settings = EditorSettings(**{k: v for k, v in overrides.items() if v is not None})
    return _settings
