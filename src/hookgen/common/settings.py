"""Runtime settings for the relay.

Non-secret options come from an optional YAML file and may be overridden by
environment variables. The Gemini key is only ever read from the environment.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_CONFIG_PATH = "configs/hookgen.yaml"
API_KEY_ENV = "GEMINI_API_KEY"

# env var -> (settings field, converter)
_ENV_OVERRIDES: dict[str, tuple[str, Any]] = {
    "HOOKGEN_MODEL": ("model", str),
    "HOOKGEN_BASE_URL": ("base_url", str),
    "HOOKGEN_TIMEOUT": ("timeout", float),
    "HOOKGEN_LOG_LEVEL": ("log_level", str),
    "HOOKGEN_HOST": ("host", str),
    "HOOKGEN_PORT": ("port", int),
}


class SettingsError(ValueError):
    """Raised when the config file or an override holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    """Process configuration handed to the request handlers."""
    api_key: str | None = field(default=None, repr=False)
    model: str = "gemini-2.0-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float | None = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: tuple[str, ...] = ("*",)

    def upstream_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


def load_cfg(path: str | Path) -> dict[str, Any]:
    """
    Read the YAML settings file.

    Args:
        path: Config path. A missing file yields an empty mapping.
    """
    p = Path(path)
    if not p.exists():
        return {}
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Config file {p} is not valid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Config file {p} must contain a mapping")
    return data


def load_settings(env: Mapping[str, str] | None = None, path: str | Path | None = None) -> Settings:
    """
    Build Settings from the YAML file and the environment.

    Args:
        env: Environment mapping, defaults to os.environ.
        path: YAML path, defaults to $HOOKGEN_CONFIG or configs/hookgen.yaml.
    """
    env = os.environ if env is None else env
    cfg = load_cfg(path or env.get("HOOKGEN_CONFIG", DEFAULT_CONFIG_PATH))

    settings = Settings()
    known = {"model", "base_url", "timeout", "log_level", "host", "port"}
    values: dict[str, Any] = {k: v for k, v in cfg.items() if k in known}
    try:
        if "cors_origins" in cfg:
            origins = cfg["cors_origins"] or ()
            values["cors_origins"] = (origins,) if isinstance(origins, str) else tuple(origins)

        for var, (name, conv) in _ENV_OVERRIDES.items():
            raw = env.get(var)
            if raw:
                values[name] = conv(raw)

        if values.get("timeout") is not None:
            values["timeout"] = float(values["timeout"])
        if "port" in values:
            values["port"] = int(values["port"])
    except (TypeError, ValueError) as e:
        raise SettingsError(f"Invalid setting: {e}") from e

    api_key = env.get(API_KEY_ENV) or None
    return replace(settings, api_key=api_key, **values)


def get_settings() -> Settings:
    """FastAPI dependency: settings are re-read for every request."""
    return load_settings()
