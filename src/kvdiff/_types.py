"""Shared type definitions for kvdiff."""

from collections.abc import Mapping
from typing import Literal

# Key of a tracked entry (e.g., a style property name)
type EntryKey = str

# Value of a tracked entry; None means absent
type EntryValue = str | None

# Input accepted by a differ once per detection cycle
type RawMapping = Mapping[EntryKey, EntryValue]

# Bucket a change record was classified into
type ChangeKind = Literal["added", "changed", "removed"]

# CLI / watcher output rendering
type OutputFormat = Literal["changes", "css"]
