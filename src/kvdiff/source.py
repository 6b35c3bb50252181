"""Mapping source — loads a raw style mapping from a file.

Supported formats, chosen by extension:

- ``.yaml`` / ``.yml`` (PyYAML ``safe_load``)
- ``.toml`` (``tomllib``)
- ``.json``

A top-level ``style`` table is unwrapped if present, so a file may hold
either the bare mapping or ``style: {...}`` alongside other data.
Numeric scalars are coerced to str (``font-weight: 700``); ``null`` is
kept as None.
"""

from __future__ import annotations

import json
import tomllib
from typing import TYPE_CHECKING, Any

import yaml

from kvdiff._errors import InvalidMappingError, SourceError

if TYPE_CHECKING:
    from pathlib import Path

    from kvdiff._types import EntryValue

SOURCE_SUFFIXES = frozenset({".yaml", ".yml", ".toml", ".json"})


def load_mapping(path: Path) -> dict[str, EntryValue]:
    """Read and normalize the mapping stored at ``path``.

    Raises:
        SourceError: Unknown extension, unreadable or unparsable file.
        InvalidMappingError: The file parsed but does not hold a flat
            table of scalar values.

    """
    suffix = path.suffix.lower()
    if suffix not in SOURCE_SUFFIXES:
        msg = f"unsupported source type {suffix or '(none)'!r}: {path.name}"
        raise SourceError(msg)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"cannot read {path.name}: {exc}"
        raise SourceError(msg) from exc

    try:
        data = _parse(text, suffix)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        msg = f"cannot parse {path.name}: {exc}"
        raise SourceError(msg) from exc

    return normalize_mapping(data)


def normalize_mapping(data: Any) -> dict[str, EntryValue]:
    """Coerce parsed file data into a str -> str-or-None mapping."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"source must contain a table, got {type(data).__name__}"
        raise InvalidMappingError(msg)
    if isinstance(data.get("style"), dict):
        data = data["style"]

    result: dict[str, EntryValue] = {}
    for key, value in data.items():
        if not isinstance(key, str):
            msg = f"source keys must be str, got {type(key).__name__} ({key!r})"
            raise InvalidMappingError(msg)
        result[key] = _coerce_value(key, value)
    return result


def _coerce_value(key: str, value: Any) -> EntryValue:
    if value is None or isinstance(value, str):
        return value
    # bool is an int subclass; "true" is never a meaningful style value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    msg = f"value for {key!r} must be a scalar, got {type(value).__name__}"
    raise InvalidMappingError(msg)


def _parse(text: str, suffix: str) -> Any:
    if suffix == ".toml":
        return tomllib.loads(text)
    if suffix == ".json":
        return json.loads(text) if text.strip() else None
    return yaml.safe_load(text)
