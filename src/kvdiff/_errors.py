"""kvdiff error hierarchy.

All kvdiff-specific errors inherit from KvDiffError for easy catching.
"""


class KvDiffError(Exception):
    """Base error for all kvdiff operations."""


class InvalidMappingError(KvDiffError, TypeError):
    """Input is not a mapping of str keys to str-or-None values."""


class ConfigError(KvDiffError):
    """Invalid or missing configuration."""


class SourceError(KvDiffError):
    """A mapping source file could not be read or parsed."""
