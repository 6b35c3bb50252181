"""kvdiff configuration.

KvDiffConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from kvdiff._errors import ConfigError
from kvdiff._types import OutputFormat

OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("changes", "css")


@dataclass(frozen=True, slots=True)
class KvDiffConfig:
    """Configuration for the kvdiff CLI and watcher.

    Attributes:
        root: Base directory for relative source paths.
              Always resolved to an absolute path on construction.
        format: Output rendering, ``changes`` (change records) or ``css``
            (the resulting inline style).
        debounce: watchfiles debounce window in milliseconds.
        step: watchfiles poll step in milliseconds.
        max_events: Capacity of the observability event log.

    """

    root: Path = field(default_factory=Path.cwd)
    format: OutputFormat = "changes"
    debounce: int = 300
    step: int = 100
    max_events: int = 10_000

    def __post_init__(self) -> None:
        if not isinstance(self.root, Path):
            object.__setattr__(self, "root", Path(self.root))
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

        if self.format not in OUTPUT_FORMATS:
            msg = f"format must be 'changes' or 'css', got {self.format!r}"
            raise ConfigError(msg)
        for name in ("debounce", "step", "max_events"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                msg = f"{name} must be a positive integer, got {value!r}"
                raise ConfigError(msg)

    def resolve(self, path: str | Path) -> Path:
        """Resolve a source path against ``root``."""
        path = Path(path)
        if path.is_absolute():
            return path
        return self.root / path
