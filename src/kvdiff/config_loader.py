"""Load KvDiffConfig from kvdiff.yaml / kvdiff.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from kvdiff._errors import ConfigError
from kvdiff.config import KvDiffConfig

CONFIG_FILENAMES = ("kvdiff.yaml", "kvdiff.yml", "kvdiff.toml")

_KNOWN_KEYS = frozenset({"format", "debounce", "step", "max_events"})


def load_config(root: Path, **overrides: object) -> KvDiffConfig:
    """Load KvDiffConfig from root, optionally merging a config file.

    Looks for kvdiff.yaml, kvdiff.yml, or kvdiff.toml in root. If found,
    loads and merges with overrides. Overrides that are None are ignored
    so unset CLI flags don't mask file values.
    """
    file_config = _read_kvdiff_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    return KvDiffConfig(root=root, **merged)


def _read_kvdiff_config(root: Path) -> dict[str, object]:
    """Read kvdiff config from yaml/toml if present. Returns empty dict otherwise."""
    for name in CONFIG_FILENAMES:
        path = root / name
        if not path.is_file():
            continue
        if path.suffix == ".toml":
            return _parse_toml(path)
        return _parse_yaml(path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"cannot read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a table, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_kvdiff_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"cannot read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_kvdiff_section(data)


def _flatten_kvdiff_section(data: dict[str, object]) -> dict[str, object]:
    """Extract kvdiff.* keys into top-level config."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _KNOWN_KEYS:
            result[k] = v
    section = data.get("kvdiff")
    if isinstance(section, dict):
        for k, v in section.items():
            if k not in _KNOWN_KEYS:
                msg = f"unknown config key: kvdiff.{k}"
                raise ConfigError(msg)
            result[k] = v
    return result
