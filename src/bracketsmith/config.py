from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from bracketsmith.core.normalizer import NormalizationConfig
from bracketsmith.files.walker import WalkConfig


DEFAULT_CONFIG_NAME = "bracketsmith.yaml"


@dataclass(frozen=True)
class AppConfig:
    walk: WalkConfig = field(default_factory=WalkConfig)
    normalization: NormalizationConfig = field(default_factory=NormalizationConfig)


def _str_tuple(value: Any, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise ValueError(f"Config key {key!r} must be a list of strings")
    return tuple(str(x) for x in value)


def _typed(data: dict, key: str, kind: type, default: Any) -> Any:
    if key not in data:
        return default
    value = data[key]
    # bool is a subclass of int; "max_passes: true" is not a pass count.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"Config key {key!r} must be of type {kind.__name__}, got {value!r}")
    return value


def config_from_dict(data: Optional[dict]) -> AppConfig:
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    walk_defaults = WalkConfig()
    walk = WalkConfig(
        directories=_str_tuple(data["directories"], "directories") if "directories" in data else walk_defaults.directories,
        extensions=_str_tuple(data["extensions"], "extensions") if "extensions" in data else walk_defaults.extensions,
        skip_patterns=(
            _str_tuple(data["skip_patterns"], "skip_patterns") if "skip_patterns" in data else walk_defaults.skip_patterns
        ),
    )

    norm_defaults = NormalizationConfig()
    normalization = NormalizationConfig(
        strategy=_typed(data, "strategy", str, norm_defaults.strategy),
        max_passes=_typed(data, "max_passes", int, norm_defaults.max_passes),
        char_class_guard=_typed(data, "char_class_guard", bool, norm_defaults.char_class_guard),
    )
    return AppConfig(walk=walk, normalization=normalization)


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Load an AppConfig from YAML.

    With no explicit path, ./bracketsmith.yaml is used when present and the
    built-in defaults otherwise.
    """
    if path is None:
        default = Path(DEFAULT_CONFIG_NAME)
        if not default.exists():
            return AppConfig()
        path = str(default)

    with open(path, "r", encoding="utf-8") as f:
        return config_from_dict(yaml.safe_load(f))
