"""Directory config loading.

The packaged ``defaults/directory.yaml`` is the base layer.  A user file
is deep-merged over it after ``${VAR}`` / ``${VAR:-default}`` references
are expanded from the environment.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from publisher_directory.config.models import DirectoryConfig

DEFAULTS_PATH = Path(__file__).parent / "defaults" / "directory.yaml"

_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<default>(?:[^}\\]|\\.)*))?}")


def _expand(match: re.Match[str]) -> str:
    name, default = match.group("name"), match.group("default")
    if name in os.environ:
        return os.environ[name]
    if default is None:
        msg = f"Environment variable '{name}' is not set and no default provided"
        raise ValueError(msg)
    return default.replace("\\}", "}")


def resolve_env_vars(data: Any) -> Any:
    """Expand environment references in every string of *data*."""
    if isinstance(data, str):
        return _ENV_REF.sub(_expand, data)
    if isinstance(data, dict):
        return {key: resolve_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [resolve_env_vars(item) for item in data]
    return data


def merge_configs(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge *overrides* into a copy of *base*."""
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML mapping from *path*; an empty file is an empty mapping."""
    p = Path(path)
    if not p.exists():
        msg = f"Config file not found: {p}"
        raise FileNotFoundError(msg)
    try:
        data = yaml.safe_load(p.read_text())
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        where = f" at line {mark.line + 1}, column {mark.column + 1}" if mark else ""
        msg = f"Failed to parse YAML in {p}{where}: {exc}"
        raise ValueError(msg) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Expected a YAML mapping at top level in {p}, got {type(data).__name__}"
        raise TypeError(msg)
    return resolve_env_vars(data)


def load_directory_config(path: str | Path | None = None) -> DirectoryConfig:
    """Validate the packaged defaults merged with the optional file at *path*."""
    merged = load_yaml(DEFAULTS_PATH)
    if path is not None:
        merged = merge_configs(merged, load_yaml(path))
    try:
        return DirectoryConfig.model_validate(merged)
    except ValidationError as exc:
        msg = f"Invalid directory config ({path or DEFAULTS_PATH}):\n{exc}"
        raise ValueError(msg) from exc
