import copy
import json
import os
from typing import Any, Dict, Optional

from jsonschema import ValidationError, validate

from .logger import logger

"""
Configuration loader for the emotion backend.

Behavior:
- An explicit path passed to `load_config` wins.
- Then the path in env var `EMOTION_BACKEND_CONFIG`.
- Then `emotion_backend/config.json` next to the package.
- If none is found or valid, conservative defaults are used (rule analysis).

Every file is validated against `json_schema/config.schema.json`.
Nested sections missing from a file are completed from the defaults.
"""

DEFAULT_CONFIG: Dict[str, Any] = {
    "analysis_method": "rule",
    "llm": {
        "provider": "siliconflow",
        "model": None,
        "timeout": 30,
        "health_check_ttl": 60,
    },
    "cache": {"max_size": 100, "ttl_seconds": 86400},
    "batch": {"max_workers": 8},
    "log_level": "INFO",
}

_SCHEMA_PATH = os.path.join(
    os.path.dirname(__file__), "..", "json_schema", "config.schema.json"
)
_schema: Optional[Dict[str, Any]] = None


def _default_config_path() -> str:
    base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    return os.path.join(base_dir, "config.json")


def _load_schema() -> Dict[str, Any]:
    global _schema
    if _schema is None:
        with open(_SCHEMA_PATH, "r", encoding="utf-8") as f:
            _schema = json.load(f)
    return _schema


def _merge_defaults(cfg: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in cfg.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from JSON with sensible fallbacks.

    The result is read fresh on every call; callers that need a stable view
    keep their own reference (the settings service does).
    """
    candidates = []
    if path:
        candidates.append(path)
    env_path = os.environ.get("EMOTION_BACKEND_CONFIG")
    if env_path:
        candidates.append(env_path)
    candidates.append(_default_config_path())

    for p in candidates:
        p_abs = os.path.abspath(p)
        if not os.path.exists(p_abs):
            continue
        try:
            with open(p_abs, "r", encoding="utf-8") as f:
                cfg = json.load(f)
            validate_config(cfg)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file {p_abs}: {e}")
            continue
        except (ValidationError, ValueError) as e:
            logger.warning(f"Rejected config {p_abs}: {e}")
            continue
        logger.info(f"Configuration loaded from {p_abs}")
        return _merge_defaults(cfg)

    logger.warning(
        "No valid config found; using defaults (rule-based analysis). "
        "Set EMOTION_BACKEND_CONFIG to customize."
    )
    return copy.deepcopy(DEFAULT_CONFIG)


def validate_config(cfg: Dict[str, Any]) -> None:
    """Validate configuration against the JSON Schema.

    Raises:
        ValueError: if cfg is not a dict
        jsonschema.ValidationError: if cfg does not match the schema
    """
    if not isinstance(cfg, dict):
        raise ValueError("Configuration must be a JSON object/dict")
    validate(instance=cfg, schema=_load_schema())
