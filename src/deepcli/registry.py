"""Provider/model registry.

models.yaml supports:
- endpoint: chat completions URL (OpenAI compatible)
- api_key_env: name of the environment variable holding the key
- timeout: seconds for the single HTTP call
- models:
    r1: deepseek-r1
    chat: deepseek-chat

Missing file -> built-in defaults. A file that exists but cannot be parsed -> ConfigError.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .logging_util import get_logger

logger = get_logger(__name__)

MODEL_ALIASES = ("r1", "chat")

DEFAULT_REGISTRY: Dict[str, Any] = {
    "endpoint": "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions",
    "api_key_env": "DEEPSEEK_API_KEY",
    "timeout": 60,
    "models": {
        "r1": "deepseek-r1",
        "chat": "deepseek-chat",
    },
}

def default_config_path(project_root: Optional[Path] = None) -> Path:
    # <root>/src/deepcli/registry.py -> parents[2] == <root>
    root = project_root or Path(__file__).resolve().parents[2]
    return root / "src" / "configs" / "models.yaml"

def _load_yaml(path: Path) -> Dict:
    if not path.exists():
        logger.debug("Config not found, using defaults: %s", path)
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")
    return data

def load_registry(path: Optional[Path] = None) -> Dict[str, Any]:
    data = _load_yaml(path or default_config_path())

    registry = dict(DEFAULT_REGISTRY)
    registry["models"] = dict(DEFAULT_REGISTRY["models"])

    for key in ("endpoint", "api_key_env", "timeout"):
        if data.get(key) is not None:
            registry[key] = data[key]

    models = data.get("models") or {}
    if not isinstance(models, dict):
        raise ConfigError("'models' must map aliases to model ids")
    for alias, model_id in models.items():
        if alias in MODEL_ALIASES and model_id:
            registry["models"][alias] = str(model_id).strip()

    return registry

def map_model(alias: str, models: Dict[str, str]) -> str:
    model_id = models.get(alias)
    if not model_id:
        raise ConfigError(f"No model id configured for '{alias}'")
    return model_id
