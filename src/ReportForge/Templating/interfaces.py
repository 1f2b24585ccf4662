"""Protocol definitions for the merge engine consumed by templates.

A template never depends on a concrete template language. It hands the
engine the caller's context, a text reader over the mergeable entry, and a
text writer for the result. Engines may also accept render filters keyed by
value type (for example XML escaping of strings). The contracts are codified
with ``typing.Protocol`` so integrators can plug in their own engines and get
runtime duck-typing via ``runtime_checkable``.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, TextIO, runtime_checkable

__all__ = ["MergeEngine", "RenderFilter"]


@runtime_checkable
class RenderFilter(Protocol):
    """Transforms a context value before the engine substitutes it."""

    def __call__(self, value: Any) -> Any:
        """Return the value to substitute for ``value``."""


@runtime_checkable
class MergeEngine(Protocol):
    """Opaque text merge capability.

    ``reentrant`` tells templates whether :meth:`evaluate` may run on several
    threads at once; non-reentrant engines are serialized per engine instance.
    """

    reentrant: bool

    def evaluate(self, context: Mapping[str, Any], source: TextIO, destination: TextIO) -> None:
        """Consume ``source`` entirely and write the merged text to ``destination``.

        Faults must be raised, never swallowed.
        """

    def register_filter(self, value_type: type, render_filter: RenderFilter) -> None:
        """Apply ``render_filter`` to context values of ``value_type`` before substitution."""
