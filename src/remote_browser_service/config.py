"""Configuration models for the remote browser service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseModel):
    """Settings for the HTTP listener."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)


class BrowserConfig(BaseModel):
    """Settings for the remote browser provisioning endpoint."""

    endpoint: str = Field(default="wss://connect.browserbase.com")
    connect_timeout: float = Field(default=30.0, description="Seconds to wait for CDP.")


class ActionConfig(BaseModel):
    """Timeouts and limits applied while executing actions."""

    navigation_timeout: float = 30.0
    element_timeout: float = 5.0
    click_settle: float = 1.0
    scroll_settle: float = 0.5
    default_scroll_amount: int = 500
    default_wait_ms: int = 1000
    content_limit: int = 4000
    screenshot_quality: int = Field(default=50, ge=0, le=100)


class SessionConfig(BaseModel):
    """Session expiry settings."""

    ttl: float = Field(default=600.0, description="Seconds before a session is stale.")
    sweep_interval: float = Field(default=300.0, description="Seconds between sweeps.")


class ServiceConfig(BaseSettings):
    """Top-level configuration for running the service."""

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_BROWSER_SERVICE_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    actions: ActionConfig = Field(default_factory=ActionConfig)
    sessions: SessionConfig = Field(default_factory=SessionConfig)


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> ServiceConfig:
    """Load configuration from an optional YAML file, the environment and overrides."""

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = ServiceConfig(**settings_kwargs)
    if not data:
        return config

    merged = config.model_dump(mode="python")
    _deep_update(merged, data)
    return ServiceConfig.model_validate(merged)


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value
