"""Shared test fixtures for kvdiff."""

from __future__ import annotations

from pathlib import Path

import pytest

from kvdiff.differ import KeyValueDiffer


@pytest.fixture
def differ() -> KeyValueDiffer:
    """A fresh differ with no tracked entries."""
    return KeyValueDiffer()


@pytest.fixture
def style_dir(tmp_path: Path) -> Path:
    """A directory with one mapping source per supported format.

    All three hold the same mapping: ``font-style: italic``,
    ``font-weight: 700`` (numeric in the file), ``color: red``.
    """
    (tmp_path / "style.yaml").write_text(
        "font-style: italic\nfont-weight: 700\ncolor: red\n"
    )
    (tmp_path / "style.toml").write_text(
        'font-style = "italic"\nfont-weight = 700\ncolor = "red"\n'
    )
    (tmp_path / "style.json").write_text(
        '{"font-style": "italic", "font-weight": 700, "color": "red"}'
    )
    return tmp_path


def write_yaml(path: Path, mapping: dict[str, str]) -> Path:
    """Write a flat mapping as YAML, preserving key order."""
    path.write_text("".join(f"{key}: {value}\n" for key, value in mapping.items()))
    return path
