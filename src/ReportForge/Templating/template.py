# === NAVMAP v1 ===
# {
#   "module": "ReportForge.Templating.template",
#   "purpose": "Template renderer producing new documents from a shared zipped template",
#   "sections": [
#     {"id": "rendereddocument", "name": "RenderedDocument", "anchor": "class-rendereddocument", "kind": "class"},
#     {"id": "zippedtemplate", "name": "ZippedTemplate", "anchor": "class-zippedtemplate", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""
Rendering documents from a zipped template.

A :class:`ZippedTemplate` is a document with one designated *mergeable
entry* whose UTF-8 text is merge engine source. :meth:`ZippedTemplate.render`
clones the template, merges the original entry's text with the caller's
context, and writes the result into the clone's entry. The template itself is
never written to, so one instance can serve any number of concurrent renders.

Key Classes:
- ``ZippedTemplate``: template state; ``render`` and ``render_async``.
- ``RenderedDocument``: terminal render output; cannot be compiled again.
"""

from __future__ import annotations

import asyncio
import io
import threading
import time
from typing import Any, Mapping, Optional

from ReportForge.Documents.errors import (
    DocumentArgumentError,
    EntryNotFoundError,
    UnsupportedOperationError,
)
from ReportForge.Documents.logging import get_logger, log_event
from ReportForge.Documents.zipped import ZippedDocument

from .engines import xml_merge_engine
from .interfaces import MergeEngine

__all__ = ["RenderedDocument", "ZippedTemplate"]

logger = get_logger(__name__, base_fields={"component": "renderer"})


class RenderedDocument(ZippedDocument):
    """Document produced by a render; structurally a plain document."""

    def compile(self, mergeable_entry: str = "", engine: Optional[MergeEngine] = None):
        raise UnsupportedOperationError("A rendered document cannot be compiled into a template")


class ZippedTemplate(ZippedDocument):
    """Zipped document whose ``mergeable_entry`` is merge engine source text."""

    def __init__(
        self,
        mergeable_entry: str,
        engine: Optional[MergeEngine] = None,
        *,
        engine_lock: Optional[threading.Lock] = None,
    ) -> None:
        if not mergeable_entry:
            raise DocumentArgumentError("mergeable_entry")
        super().__init__()
        self.mergeable_entry = mergeable_entry
        self.engine: MergeEngine = engine if engine is not None else xml_merge_engine(type(self).__name__)
        # Serializes non-reentrant engines across this template and its clones.
        self._engine_lock = engine_lock if engine_lock is not None else threading.Lock()

    def _create_empty(self) -> "ZippedTemplate":
        return type(self)(self.mergeable_entry, self.engine, engine_lock=self._engine_lock)

    def load_from_document(self, document: ZippedDocument) -> None:
        """Replace this template's entries with copies of ``document``'s entries."""

        if document is None:
            raise DocumentArgumentError("document")
        staging = ZippedDocument()
        document.copy_to(staging)
        self._entries.replace_all(staging.entries)

    def compile(self, mergeable_entry: str = "", engine: Optional[MergeEngine] = None):
        raise UnsupportedOperationError("A template is already compiled")

    def render(self, context: Mapping[str, Any]) -> RenderedDocument:
        """
        Produce a new document with the mergeable entry merged against ``context``.

        Args:
            context: Variable name to value mapping handed to the merge engine.

        Returns:
            A fresh :class:`RenderedDocument`; every other entry is byte-identical
            to this template's at call time.

        Raises:
            DocumentArgumentError: If ``context`` is ``None``.
            EntryNotFoundError: If the template has no mergeable entry.
            Exception: Any merge engine failure, unchanged.
        """

        if context is None:
            raise DocumentArgumentError("context")
        if not self.entry_exists(self.mergeable_entry):
            raise EntryNotFoundError(self.mergeable_entry)

        started = time.perf_counter()
        result = self._clone_into(RenderedDocument())

        with self.get_entry_input_stream(self.mergeable_entry) as raw_source, io.BytesIO() as sink:
            reader = io.TextIOWrapper(raw_source, encoding="utf-8", newline="")
            writer = io.TextIOWrapper(sink, encoding="utf-8", newline="")
            try:
                self._evaluate(context, reader, writer)
                writer.flush()
                merged = sink.getvalue()
            finally:
                writer.detach()
                reader.detach()

        with result.get_entry_output_stream(self.mergeable_entry) as out_stream:
            out_stream.write(merged)

        log_event(
            logger,
            "debug",
            "Rendered template",
            mergeable_entry=self.mergeable_entry,
            engine=type(self.engine).__name__,
            bytes=len(merged),
            elapsed_ms=round((time.perf_counter() - started) * 1000.0, 3),
        )
        return result

    async def render_async(self, context: Mapping[str, Any]) -> RenderedDocument:
        """Asynchronous :meth:`render` executed in a worker thread."""

        if context is None:
            raise DocumentArgumentError("context")
        return await asyncio.to_thread(self.render, context)

    def _evaluate(self, context: Mapping[str, Any], reader: io.TextIOBase, writer: io.TextIOBase) -> None:
        if getattr(self.engine, "reentrant", False):
            self.engine.evaluate(context, reader, writer)
            return
        with self._engine_lock:
            self.engine.evaluate(context, reader, writer)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(mergeable_entry={self.mergeable_entry!r}, "
            f"entries={len(self._entries)}, engine={self.engine!r})"
        )
