# === NAVMAP v1 ===
# {
#   "module": "ReportForge.Templating.engines",
#   "purpose": "Concrete merge engines backing document templates",
#   "sections": [
#     {"id": "jinjamergeengine", "name": "JinjaMergeEngine", "anchor": "class-jinjamergeengine", "kind": "class"},
#     {"id": "dollarmergeengine", "name": "DollarMergeEngine", "anchor": "class-dollarmergeengine", "kind": "class"},
#     {"id": "xml-merge-engine", "name": "xml_merge_engine", "anchor": "function-xml-merge-engine", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""
Merge engines that satisfy :class:`~ReportForge.Templating.interfaces.MergeEngine`.

``DollarMergeEngine`` backs the default :func:`xml_merge_engine`: templates
use ``$name`` / ``${name}`` references and unresolved references are left in
the output as written. ``JinjaMergeEngine`` is available for templates authored
in Jinja2; every ``{{ ... }}`` output passes through the registered render
filters via the environment's ``finalize`` hook.
"""

from __future__ import annotations

import string
from collections.abc import Mapping as MappingABC
from typing import Any, Iterator, Mapping, Optional, TextIO, Type

from jinja2 import Environment, Undefined

from .filters import FilterRegistry, XmlStringRenderFilter
from .interfaces import RenderFilter

__all__ = ["DollarMergeEngine", "JinjaMergeEngine", "xml_merge_engine"]


class JinjaMergeEngine:
    """Jinja2-backed merge engine with type-keyed render filters."""

    reentrant = True

    def __init__(
        self,
        name: str = "ReportForge",
        *,
        environment: Optional[Environment] = None,
        undefined: Type[Undefined] = Undefined,
    ) -> None:
        self.name = name
        self._filters = FilterRegistry()
        base = environment or Environment(
            autoescape=False,
            keep_trailing_newline=True,
            undefined=undefined,
        )
        self.environment = base.overlay(finalize=self._finalize)

    def _finalize(self, value: Any) -> Any:
        return self._filters.apply(value)

    def register_filter(self, value_type: type, render_filter: RenderFilter) -> None:
        self._filters.register(value_type, render_filter)

    def evaluate(self, context: Mapping[str, Any], source: TextIO, destination: TextIO) -> None:
        template = self.environment.from_string(source.read())
        destination.write(template.render(dict(context)))

    def __repr__(self) -> str:
        return f"JinjaMergeEngine(name={self.name!r}, filters={len(self._filters)})"


class _FilteredContext(MappingABC):
    """Context view applying render filters on lookup."""

    def __init__(self, context: Mapping[str, Any], filters: FilterRegistry) -> None:
        self._context = context
        self._filters = filters

    def __getitem__(self, key: str) -> Any:
        return self._filters.apply(self._context[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._context)

    def __len__(self) -> int:
        return len(self._context)


class DollarMergeEngine:
    """``$name`` substitution engine built on :class:`string.Template`."""

    reentrant = True

    def __init__(self, name: str = "ReportForge") -> None:
        self.name = name
        self._filters = FilterRegistry()

    def register_filter(self, value_type: type, render_filter: RenderFilter) -> None:
        self._filters.register(value_type, render_filter)

    def evaluate(self, context: Mapping[str, Any], source: TextIO, destination: TextIO) -> None:
        template = string.Template(source.read())
        destination.write(template.safe_substitute(_FilteredContext(context, self._filters)))

    def __repr__(self) -> str:
        return f"DollarMergeEngine(name={self.name!r}, filters={len(self._filters)})"


def xml_merge_engine(name: str = "ReportForge") -> DollarMergeEngine:
    """Return the default template engine: ``$name`` references, XML-escaped strings."""

    engine = DollarMergeEngine(name)
    engine.register_filter(str, XmlStringRenderFilter())
    return engine
