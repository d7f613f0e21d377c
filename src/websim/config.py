# src/websim/config.py
from __future__ import annotations

import logging
import pickle
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, cast
import contextvars

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource

from .exceptions import WebsimError


class ConfigError(WebsimError):
    """Configuration-related error."""
    pass


# ---------------------------------------------------------------------------
# Config file support (context + loader)
# ---------------------------------------------------------------------------

_CONFIG_FILE_CTX: contextvars.ContextVar[Path | None] = contextvars.ContextVar(
    "WEBSIM_CONFIG_FILE_CTX",
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
    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} did not parse into a dict")
    return cast(dict[str, Any], data)


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-not-found]
    except ImportError as e:
        raise ConfigError(
            f"YAML config file selected ({path}), but PyYAML is not installed. "
            "Install websim[yaml] or use config.toml."
        ) from e

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
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

    This source is inserted BELOW secrets and ABOVE defaults.
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
    format: str = "%(asctime)-20s %(name)-30s %(levelname)-8s: %(message)s"

    def configure(self) -> None:
        logging.basicConfig(level=self.level, format=self.format, force=True)


class SessionSettings(BaseModel):
    require_hosts: bool = Field(
        True,
        description="Raise when a session releases cloudlets before both host ids are set. "
                    "If false, cloudlets are released without a target host and a warning is logged.",
    )


class DriverSettings(BaseModel):
    step: float = Field(1.0, description="Simulation time between driver ticks.", gt=0)
    start_time: float = Field(0.0, description="Simulation time of the first tick.")
    until: float = Field(3600.0, description="Last simulation time to tick at.")

    @model_validator(mode="after")
    def _validate_horizon(self) -> "DriverSettings":
        if self.until <= self.start_time:
            raise ValueError(f"`until` ({self.until}) must be after `start_time` ({self.start_time}).")
        return self


class WorkloadSettings(BaseModel):
    sessions: int = Field(1, description="Number of sessions to simulate.", ge=1)
    seed: int = Field(0, description="Master seed; each session generator gets its own spawned stream.")
    app_mean_interval: float = Field(5.0, description="Mean time between app server cloudlets.", gt=0)
    db_mean_interval: float = Field(5.0, description="Mean time between db server cloudlets.", gt=0)
    app_length: float = Field(1.0, description="Work per app server cloudlet.", ge=0)
    db_length: float = Field(1.0, description="Work per db server cloudlet.", ge=0)
    lookahead: float = Field(0.0, description="How far ahead of the clock generators stage cloudlets.", ge=0)
    limit: int | None = Field(None, description="Maximum cloudlets per generator (None = unbounded).", ge=0)


class HostSettings(BaseModel):
    app_speed: float = Field(1.0, description="Work per unit of time on the app server host.", gt=0)
    db_speed: float = Field(1.0, description="Work per unit of time on the db server host.", gt=0)


# ─────────────────────────────────────────────────────────────
# Top-level settings
# ─────────────────────────────────────────────────────────────


class AppSettings(BaseSettings):
    """
    Canonical configuration for a websim run.

    Precedence (highest → lowest):

    1. Init kwargs (tests/overrides)
    2. Environment variables
    3. .env and .env.local
    4. Secret files in /run/secrets/websim
    5. Config file
    6. Defaults in this class
    """

    model_config = SettingsConfigDict(
        env_prefix="WEBSIM_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        secrets_dir="/run/secrets/websim",
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
            file_secret_settings,
            _ConfigFileSettingsSource(settings_cls),
        )

    logging: LoggingSettings = LoggingSettings()
    session: SessionSettings = SessionSettings()
    driver: DriverSettings = DriverSettings()
    workload: WorkloadSettings = WorkloadSettings()
    hosts: HostSettings = HostSettings()


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
