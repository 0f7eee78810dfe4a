"""Engine configuration loaded from YAML with built-in defaults."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from behavior_engine.errors import InvalidInputError


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for the analytics facade."""

    enable_pattern_recognition: bool = True
    enable_predictions: bool = True
    pattern_limit: int = 5
    confidence_threshold: float = 0.0
    cache_expiration_hours: float = 1.0

    def __post_init__(self) -> None:
        if self.pattern_limit < 0:
            raise InvalidInputError(f"pattern_limit must be >= 0, got {self.pattern_limit}")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise InvalidInputError(f"confidence_threshold must be in [0, 1], got {self.confidence_threshold}")
        if self.cache_expiration_hours < 0:
            raise InvalidInputError(f"cache_expiration_hours must be >= 0, got {self.cache_expiration_hours}")


_FIELD_TYPES = {
    "enable_pattern_recognition": (bool,),
    "enable_predictions": (bool,),
    "pattern_limit": (int,),
    "confidence_threshold": (int, float),
    "cache_expiration_hours": (int, float),
}


def config_from_mapping(section: dict) -> EngineConfig:
    """Build a config from a plain mapping, rejecting unknown keys and wrong types."""

    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise InvalidInputError(f"Unknown config keys {unknown}")

    for key, value in section.items():
        expected = _FIELD_TYPES[key]
        if (isinstance(value, bool) and bool not in expected) or not isinstance(value, expected):
            raise InvalidInputError(f"Config key '{key}' has invalid value {value!r}")

    return replace(EngineConfig(), **section)


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load the `behavior_engine` section of a YAML file, or defaults if absent."""

    if path is None or not Path(path).exists():
        return EngineConfig()

    with open(path, encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}

    if not isinstance(payload, dict):
        raise InvalidInputError("Config file must contain a mapping")

    section = payload.get("behavior_engine", {}) or {}
    if not isinstance(section, dict):
        raise InvalidInputError("'behavior_engine' config section must be a mapping")
    return config_from_mapping(section)
