"""Load continuity engine overrides from YAML (with fallbacks)."""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

import yaml

from .config import DEFAULT_CONFIG, ContinuityConfig

logger = logging.getLogger(__name__)

_CACHE: dict[str, ContinuityConfig] = {}

_TUPLE_FIELDS = {
    "active_keywords",
    "inactive_keywords",
    "active_development_keywords",
    "communication_fields",
    "significant_fields",
    "question_phrases",
}


def config_from_mapping(data: dict[str, Any] | None, base: ContinuityConfig | None = None) -> ContinuityConfig:
    """Build a ContinuityConfig from a plain mapping, ignoring unknown keys."""
    base = base or DEFAULT_CONFIG
    if not data:
        return base
    if not isinstance(data, dict):
        raise TypeError(f"continuity settings must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(ContinuityConfig)}
    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown continuity setting %r", key)
            continue
        if key in _TUPLE_FIELDS:
            value = (str(value),) if isinstance(value, str) else tuple(str(v) for v in value)
        elif key == "momentum_weights":
            if not isinstance(value, dict):
                raise TypeError(f"momentum_weights must be a mapping, got {type(value).__name__}")
            merged = dict(base.momentum_weights)
            merged.update({str(k): float(v) for k, v in value.items()})
            value = merged
        elif isinstance(getattr(base, key), bool):
            value = bool(value)
        elif isinstance(getattr(base, key), (int, float)):
            value = type(getattr(base, key))(value)
        overrides[key] = value
    return replace(base, **overrides)


def load_continuity_config(base_path: str | Path | None = None, *, use_cache: bool = True) -> ContinuityConfig:
    """Read ``continuity.yaml`` (``continuity:`` section) or fall back to defaults."""
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "continuity.yaml"
    cache_key = str(yaml_path)
    if use_cache and cache_key in _CACHE:
        return _CACHE[cache_key]
    if not yaml_path.exists():
        config = DEFAULT_CONFIG
    else:
        try:
            data = yaml.safe_load(yaml_path.read_text()) or {}
            if not isinstance(data, dict):
                raise TypeError(f"top level must be a mapping, got {type(data).__name__}")
            config = config_from_mapping(data.get("continuity") or {})
        except (yaml.YAMLError, TypeError, ValueError) as exc:
            logger.warning("Falling back to default continuity config (%s): %s", yaml_path, exc)
            config = DEFAULT_CONFIG
    _CACHE[cache_key] = config
    return config


def clear_config_cache() -> None:
    _CACHE.clear()
