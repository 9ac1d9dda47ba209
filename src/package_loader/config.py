# src/package_loader/config.py
from __future__ import annotations

import logging
import pickle
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, cast
import contextvars

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource

from package_loader.exceptions import ConfigError

# ---------------------------------------------------------------------------
# Config file support (context + loader)
# ---------------------------------------------------------------------------

_CONFIG_FILE_CTX: contextvars.ContextVar[Path | None] = contextvars.ContextVar(
    "PACKAGE_LOADER_CONFIG_FILE_CTX",
    default=None,
)


def _find_default_config_file() -> Path | None:
    """Look for config file in current working directory."""
    cwd = Path.cwd()
    for name in ("config.toml", "config.yaml", "config.yml"):
        p = cwd / name
        if p.is_file():
            return p
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    import tomllib  # Python 3.11 stdlib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} did not parse into a dict")
    return cast(dict[str, Any], data)


def _load_yaml(path: Path) -> dict[str, Any]:
    import yaml

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {path} (YAML error): {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} did not parse into a dict")
    return cast(dict[str, Any], data)


def _load_config_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix == ".toml":
        return _load_toml(path)
    if suffix in {".yaml", ".yml"}:
        return _load_yaml(path)
    raise ConfigError(f"Unsupported config file type: {path} (expected .toml/.yaml/.yml)")


class _ConfigFileSettingsSource(PydanticBaseSettingsSource):
    """Settings source that loads from an optional config file.

    This source is inserted BELOW dotenv and ABOVE defaults.
    """

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        # Not used; we provide a full dict in __call__.
        raise NotImplementedError

    def __call__(self) -> dict[str, Any]:
        path = _CONFIG_FILE_CTX.get()
        if path is None:
            return {}

        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")

        return _load_config_file(path)


@contextmanager
def _config_file_context(path: Path | None) -> Any:
    token = _CONFIG_FILE_CTX.set(path)
    try:
        yield
    finally:
        _CONFIG_FILE_CTX.reset(token)


# ─────────────────────────────────────────────────────────────
# Section configs
# ─────────────────────────────────────────────────────────────


class LoggingSettings(BaseModel):
    level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"
    format: str = "%(asctime)-20s %(name)-40s %(levelname)-8s: %(message)s"


class LoaderSettings(BaseModel):
    instance: str = Field("default", description="Name of the loader instance to forge.")
    prepend: bool = Field(False, description="Install the class hook ahead of the existing import finders.")
    dirs: dict[str, Path] = Field(
        default_factory=dict,
        description="Root directories to search for packages, keyed by logical name.",
    )
    classes: dict[str, Path] = Field(
        default_factory=dict,
        description="Module names mapped to the source files that define them.",
    )


# ─────────────────────────────────────────────────────────────
# Top-level settings
# ─────────────────────────────────────────────────────────────


class AppSettings(BaseSettings):
    """
    Application configuration for the package loader.

    Precedence (highest → lowest):

    1. Init kwargs (tests/overrides)
    2. Environment variables
    3. .env and .env.local
    4. Config file
    5. Defaults in this class
    """

    model_config = SettingsConfigDict(
        env_prefix="PACKAGE_LOADER_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Earlier sources override later sources.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            _ConfigFileSettingsSource(settings_cls),
        )

    logging: LoggingSettings = LoggingSettings()
    loader: LoaderSettings = LoaderSettings()


@lru_cache(maxsize=16)
def _get_settings_cached(config_file_str: str | None, overrides_blob: bytes) -> AppSettings:
    overrides = pickle.loads(overrides_blob)
    config_path = Path(config_file_str) if config_file_str is not None else None
    with _config_file_context(config_path):
        return AppSettings(**overrides)


def get_settings(*, config_file: str | Path | None = None, **overrides: Any) -> AppSettings:
    """
    Cached accessor for process-wide settings.

    `overrides` are init kwargs → highest precedence (handy in tests).

    If `config_file` is None, we look in CWD for: config.toml, config.yaml, config.yml.
    If none found, config-file source is disabled and defaults apply.
    """
    resolved: Path | None
    if config_file is None:
        resolved = _find_default_config_file()
    else:
        resolved = Path(config_file)

    # Cache key includes config file and overrides.
    overrides_blob = pickle.dumps(overrides, protocol=pickle.HIGHEST_PROTOCOL)
    return _get_settings_cached(str(resolved) if resolved is not None else None, overrides_blob)


def clear_settings_cache() -> None:
    _get_settings_cached.cache_clear()


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Attach a stream handler with the configured format to the package logger."""
    logger = logging.getLogger("package_loader")
    logger.setLevel(settings.level)
    formatter = logging.Formatter(settings.format)
    for handler in logger.handlers:
        if getattr(handler, "_package_loader_handler", False):
            handler.setFormatter(formatter)
            return logger

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler._package_loader_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
