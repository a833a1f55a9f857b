"""Runtime settings: API key, endpoint and timeout.

The API key is mandatory. load_settings() is called before any prompt or file is
looked at, so a missing key fails fast.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from .errors import ConfigError
from .registry import load_registry

@dataclass
class Settings:
    api_key: str
    endpoint: str
    timeout: float = 60.0
    api_key_env: str = "DEEPSEEK_API_KEY"
    models: Dict[str, str] = field(default_factory=dict)

def _sanitize_api_key(raw: str) -> str:
    k = (raw or "").strip()
    k = k.strip(' "\'`')
    return k

def _to_timeout(v: object) -> float:
    try:
        t = float(v)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid timeout: {v!r}")
    if t <= 0:
        raise ConfigError(f"Timeout must be positive: {v!r}")
    return t

def load_settings(environ: Optional[Mapping[str, str]] = None, config_path: Optional[Path] = None) -> Settings:
    env = os.environ if environ is None else environ

    if config_path is None and (env.get("DEEPCLI_CONFIG") or "").strip():
        config_path = Path(env["DEEPCLI_CONFIG"].strip()).expanduser()
    registry = load_registry(config_path)

    api_key_env = str(registry["api_key_env"])
    api_key = _sanitize_api_key(env.get(api_key_env) or "")
    if not api_key:
        raise ConfigError(f"{api_key_env} environment variable not set")

    endpoint = (env.get("DEEPCLI_ENDPOINT") or "").strip() or str(registry["endpoint"]).strip()
    timeout = _to_timeout(env.get("DEEPCLI_TIMEOUT") or registry["timeout"])

    return Settings(
        api_key=api_key,
        endpoint=endpoint,
        timeout=timeout,
        api_key_env=api_key_env,
        models=dict(registry["models"]),
    )
