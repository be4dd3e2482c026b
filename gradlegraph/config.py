"""Configuration loading for gradlegraph (.gradlegraph.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".gradlegraph.yml"

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "gradlegraph"

ENV_API_BASE_URL_KEYS = ("GRADLEGRAPH_API_BASE_URL", "GITHUB_API_URL")
ENV_REQUEST_TIMEOUT_KEYS = ("GRADLEGRAPH_REQUEST_TIMEOUT",)


@dataclass
class FetchPolicy:
    """Retry, throttle and pacing knobs shared by every remote call.

    Delays are expressed in seconds.
    """

    attempts: int = 3
    base_delay: float = 1.0
    low_water_mark: int = 10
    cooldown: float = 2.0
    rate_limit_cap: float = 60.0
    inter_request_delay: float = 0.3

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ConfigError("retry.attempts must be at least 1")
        for name in ("base_delay", "cooldown", "rate_limit_cap", "inter_request_delay"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")


@dataclass
class GitHubConfig:
    """Remote API endpoint settings."""

    api_base_url: str = DEFAULT_API_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = 30.0


@dataclass
class GradleGraphConfig:
    """Represents the settings defined in .gradlegraph.yml."""

    root: Path
    github: GitHubConfig = field(default_factory=GitHubConfig)
    policy: FetchPolicy = field(default_factory=FetchPolicy)


def load_config(config_path: Path | None = None) -> GradleGraphConfig:
    """Load configuration from disk, applying environment overrides."""
    config_file = _resolve_config_path(config_path or Path.cwd())
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    github_data = _as_dict(data.get("github"))
    github = GitHubConfig()
    base_url = _as_str(github_data.get("api_base_url"))
    if base_url:
        github.api_base_url = base_url
    user_agent = _as_str(github_data.get("user_agent"))
    if user_agent:
        github.user_agent = user_agent
    timeout = _as_float(github_data.get("request_timeout"))
    if timeout is not None:
        github.request_timeout = timeout

    env_base_url = _first_env_value(ENV_API_BASE_URL_KEYS)
    if env_base_url:
        github.api_base_url = env_base_url
    env_timeout = _as_float(_first_env_value(ENV_REQUEST_TIMEOUT_KEYS))
    if env_timeout is not None:
        github.request_timeout = env_timeout
    github.api_base_url = github.api_base_url.rstrip("/")

    retry_data = _as_dict(data.get("retry"))
    fetch_data = _as_dict(data.get("fetch"))
    defaults = FetchPolicy()
    policy = FetchPolicy(
        attempts=_pick(_as_int(retry_data.get("attempts")), defaults.attempts),
        base_delay=_pick(_as_float(retry_data.get("base_delay")), defaults.base_delay),
        low_water_mark=_pick(
            _as_int(retry_data.get("low_water_mark")), defaults.low_water_mark
        ),
        cooldown=_pick(_as_float(retry_data.get("cooldown")), defaults.cooldown),
        rate_limit_cap=_pick(
            _as_float(retry_data.get("rate_limit_cap")), defaults.rate_limit_cap
        ),
        inter_request_delay=_pick(
            _as_float(fetch_data.get("inter_request_delay")), defaults.inter_request_delay
        ),
    )

    return GradleGraphConfig(root=root, github=github, policy=policy)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value


def _first_env_value(keys: Sequence[str]) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "FetchPolicy",
    "GitHubConfig",
    "GradleGraphConfig",
    "load_config",
]
