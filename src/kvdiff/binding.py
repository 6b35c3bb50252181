"""Style binding — applies detected mapping changes to a style target.

A binding owns one ``KeyValueDiffer`` for its whole lifetime.  The driver
assigns the latest raw mapping to ``raw_style`` and calls ``check()`` once
per detection cycle; the binding diffs the mapping and replays the change
set against its target:

- added and changed keys -> ``target.set_property(key, value)``
- removed keys -> ``target.remove_property(key)``

Example:
    >>> style = InlineStyle()
    >>> binding = StyleBinding(style)
    >>> binding.raw_style = {"font-style": "italic", "font-size": "large"}
    >>> _ = binding.check()
    >>> style.css_text
    'font-style: italic; font-size: large;'

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from kvdiff.differ import KeyValueDiffer

if TYPE_CHECKING:
    from collections.abc import Iterator

    from kvdiff._types import EntryValue, RawMapping
    from kvdiff.differ import ChangeSet
    from kvdiff.observability.collector import DiffCollector


class StyleTarget(Protocol):
    """Anything a binding can write style properties to."""

    def set_property(self, name: str, value: EntryValue) -> None: ...

    def remove_property(self, name: str) -> None: ...


class InlineStyle:
    """Ordered, in-memory style property store.

    Mirrors an element's inline style declaration: properties keep the
    order in which they were first set, and ``css_text`` renders them as a
    ``style`` attribute value.  Setting a property to None removes it.

    """

    __slots__ = ("_properties",)

    def __init__(self, properties: dict[str, str] | None = None) -> None:
        self._properties: dict[str, str] = dict(properties or {})

    @classmethod
    def from_css_text(cls, css_text: str) -> InlineStyle:
        """Parse ``"name: value; name: value"`` into an InlineStyle.

        Semicolons inside quotes or parentheses (e.g. a
        ``url("data:image/png;base64,...")`` value) do not end a
        declaration.  Empty declarations are skipped; a declaration
        without a colon is ignored, as a browser would.
        """
        style = cls()
        for declaration in _split_declarations(css_text):
            name, sep, value = declaration.partition(":")
            name = name.strip()
            if not sep or not name:
                continue
            style.set_property(name, value.strip())
        return style

    @property
    def css_text(self) -> str:
        """Serialized declarations, e.g. ``"color: red; margin: 0;"``."""
        return " ".join(f"{name}: {value};" for name, value in self._properties.items())

    def get_property(self, name: str) -> str | None:
        return self._properties.get(name)

    def set_property(self, name: str, value: EntryValue) -> None:
        if value is None or value == "":
            self._properties.pop(name, None)
            return
        self._properties[name] = value

    def remove_property(self, name: str) -> None:
        self._properties.pop(name, None)

    def as_dict(self) -> dict[str, str]:
        return dict(self._properties)

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InlineStyle):
            return NotImplemented
        return list(self._properties.items()) == list(other._properties.items())

    def __repr__(self) -> str:
        return f"InlineStyle({self.css_text!r})"


class StyleBinding:
    """Binds a raw style mapping to a style target.

    The differ is created lazily the first time a non-None mapping is
    assigned, so a binding that never received data does nothing on
    ``check()``.

    Args:
        target: Where property changes are applied.
        collector: Optional collector that records each non-empty cycle.
        name: Label used in recorded events (e.g., the element id).

    """

    __slots__ = ("_collector", "_differ", "_name", "_raw_style", "_target")

    def __init__(
        self,
        target: StyleTarget,
        *,
        collector: DiffCollector | None = None,
        name: str = "",
    ) -> None:
        self._target = target
        self._collector = collector
        self._name = name
        self._raw_style: RawMapping | None = None
        self._differ: KeyValueDiffer | None = None

    @property
    def target(self) -> StyleTarget:
        return self._target

    @property
    def raw_style(self) -> RawMapping | None:
        """The mapping the next ``check()`` will diff against."""
        return self._raw_style

    @raw_style.setter
    def raw_style(self, value: RawMapping | None) -> None:
        self._raw_style = value
        if self._differ is None and value is not None:
            self._differ = KeyValueDiffer()

    def check(self) -> ChangeSet | None:
        """Run one detection cycle and apply the result to the target.

        Returns:
            The applied ChangeSet, or None if nothing changed.

        Raises:
            InvalidMappingError: If the current raw style is malformed.
                The target is not touched.

        """
        if self._differ is None:
            return None

        changes = self._differ.diff(self._raw_style)
        if changes is None:
            return None

        target = self._target
        for record in changes.added:
            target.set_property(record.key, record.current_value)
        for record in changes.changed:
            target.set_property(record.key, record.current_value)
        for record in changes.removed:
            target.remove_property(record.key)

        if self._collector is not None:
            self._collector.record_diff(
                self._name,
                added=len(changes.added),
                changed=len(changes.changed),
                removed=len(changes.removed),
            )
        return changes


def _split_declarations(css_text: str) -> Iterator[str]:
    """Split on ``;`` at top level, outside quotes and parentheses."""
    start = 0
    depth = 0
    quote: str | None = None
    escaped = False
    for i, char in enumerate(css_text):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == ";" and not depth:
            yield css_text[start:i]
            start = i + 1
    yield css_text[start:]
