"""Render filters registered with merge engines."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional
from xml.sax.saxutils import escape

__all__ = ["FilterRegistry", "XmlStringRenderFilter"]

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


class XmlStringRenderFilter:
    """Escape string values so they are safe inside XML text and attribute values."""

    def __call__(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return escape(value, _XML_ENTITIES)

    def __repr__(self) -> str:
        return "XmlStringRenderFilter()"


class FilterRegistry:
    """Type-keyed filter lookup honouring subclass relationships (MRO order)."""

    def __init__(self) -> None:
        self._filters: Dict[type, Callable[[Any], Any]] = {}

    def register(self, value_type: type, render_filter: Callable[[Any], Any]) -> None:
        if not isinstance(value_type, type):
            raise TypeError(f"value_type must be a type, got {value_type!r}")
        if not callable(render_filter):
            raise TypeError(f"render_filter must be callable, got {render_filter!r}")
        self._filters[value_type] = render_filter

    def lookup(self, value_type: type) -> Optional[Callable[[Any], Any]]:
        for candidate in value_type.__mro__:
            render_filter = self._filters.get(candidate)
            if render_filter is not None:
                return render_filter
        return None

    def apply(self, value: Any) -> Any:
        render_filter = self.lookup(type(value))
        if render_filter is None:
            return value
        return render_filter(value)

    def __len__(self) -> int:
        return len(self._filters)
