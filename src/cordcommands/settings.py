from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import SecretStr, ValidationError, field_serializer, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import TomlConfigSettingsSource

from .errors import CommandsError

HOME_CONFIG_PATH = Path.home() / ".cordcommands" / "cordcommands.toml"


class ConfigError(CommandsError):
    pass


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="forbid",
        env_prefix="CORDCOMMANDS__",
        env_nested_delimiter="__",
    )

    token: SecretStr | None = None
    prefixes: list[str] = ["!"]
    guild_id: int | None = None
    debug: bool = False
    log_json: bool = False

    @field_validator("token", mode="before")
    @classmethod
    def _validate_token(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, SecretStr):
            return value
        if not isinstance(value, str):
            raise ValueError("token must be a string")
        return value.strip()

    @field_validator("prefixes", mode="before")
    @classmethod
    def _validate_prefixes(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not value:
            raise ValueError("prefixes must be a non-empty list of strings")
        cleaned: list[str] = []
        for item in value:
            if not isinstance(item, str) or not item.strip():
                raise ValueError("prefixes must be non-empty strings")
            cleaned.append(item.strip())
        return cleaned

    @field_validator("guild_id", mode="before")
    @classmethod
    def _validate_guild_id(cls, value: Any) -> Any:
        if value is None:
            return None
        # Environment variables arrive as strings.
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("guild_id must be an integer")
        return value

    @field_serializer("token")
    def _dump_token(self, value: SecretStr | None) -> str | None:
        return value.get_secret_value() if value else None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(path: str | Path | None = None) -> tuple[BotSettings, Path]:
    cfg_path = _resolve_config_path(path)
    _ensure_config_file(cfg_path)
    return _load_settings_from_path(cfg_path), cfg_path


def load_settings_if_exists(
    path: str | Path | None = None,
) -> tuple[BotSettings, Path] | None:
    cfg_path = _resolve_config_path(path)
    if cfg_path.exists():
        if not cfg_path.is_file():
            raise ConfigError(
                f"Config path {cfg_path} exists but is not a file."
            ) from None
        return _load_settings_from_path(cfg_path), cfg_path
    return None


def validate_settings_data(data: dict[str, Any], *, config_path: Path) -> BotSettings:
    try:
        return BotSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc


def require_token(settings: BotSettings, config_path: Path) -> str:
    if settings.token is None or not settings.token.get_secret_value().strip():
        raise ConfigError(f"Missing bot token in {config_path}.")
    return settings.token.get_secret_value().strip()


def _resolve_config_path(path: str | Path | None) -> Path:
    return Path(path).expanduser() if path else HOME_CONFIG_PATH


def _ensure_config_file(cfg_path: Path) -> None:
    if cfg_path.exists() and not cfg_path.is_file():
        raise ConfigError(f"Config path {cfg_path} exists but is not a file.") from None
    if not cfg_path.exists():
        raise ConfigError(f"Missing config file {cfg_path}.") from None


def _load_settings_from_path(cfg_path: Path) -> BotSettings:
    cfg = dict(BotSettings.model_config)
    cfg["toml_file"] = cfg_path
    Bound = type(
        "BotSettingsBound",
        (BotSettings,),
        {"model_config": SettingsConfigDict(**cfg)},
    )
    try:
        return Bound()
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {cfg_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed TOML in {cfg_path}: {exc}") from None
