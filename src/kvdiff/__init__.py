"""kvdiff — key-value change detection for repeatedly sampled mappings.

Feed a differ the latest mapping once per detection cycle; it reports
exactly which entries were added, changed, or removed since the last
sample, without the caller keeping the previous snapshot.

Quick start::

    from kvdiff import KeyValueDiffer

    differ = KeyValueDiffer()
    differ.diff({"a": "1", "b": "2"})   # added a, b
    differ.diff({"a": "1", "b": "9"})   # changed b
    differ.diff({"a": "1"})             # removed b
    differ.diff({"a": "1"})             # None — nothing changed

Apply changes to a style target::

    from kvdiff import InlineStyle, StyleBinding

    style = InlineStyle()
    binding = StyleBinding(style)
    binding.raw_style = {"font-weight": "bold"}
    binding.check()
    style.css_text                      # 'font-weight: bold;'

"""

from kvdiff._errors import ConfigError, InvalidMappingError, KvDiffError, SourceError
from kvdiff.differ import ChangeRecord, ChangeSet, KeyValueDiffer

__version__ = "0.1.0"
__all__ = [
    "ChangeRecord",
    "ChangeSet",
    "ConfigError",
    "InlineStyle",
    "InvalidMappingError",
    "KeyValueDiffer",
    "KvDiffConfig",
    "KvDiffError",
    "MappingWatcher",
    "SourceError",
    "StyleBinding",
    "__version__",
    "load_mapping",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API outside the core differ.

    Keeps ``import kvdiff`` from pulling in PyYAML and watchfiles.
    """
    if name in ("InlineStyle", "StyleBinding"):
        from kvdiff import binding

        return getattr(binding, name)

    if name == "KvDiffConfig":
        from kvdiff.config import KvDiffConfig

        return KvDiffConfig

    if name == "load_mapping":
        from kvdiff.source import load_mapping

        return load_mapping

    if name == "MappingWatcher":
        from kvdiff.watcher import MappingWatcher

        return MappingWatcher

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
