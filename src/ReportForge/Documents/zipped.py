# === NAVMAP v1 ===
# {
#   "module": "ReportForge.Documents.zipped",
#   "purpose": "In-memory entry store for zip-packaged office documents",
#   "sections": [
#     {"id": "zippeddocument", "name": "ZippedDocument", "anchor": "class-zippeddocument", "kind": "class"},
#     {"id": "require-path", "name": "_require_path", "anchor": "function-require-path", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""
Zip-packaged documents held as addressable collections of byte entries.

A :class:`ZippedDocument` loads every member of a zip archive into memory,
keyed by its full slash-separated path, and writes the members back out with a
per-entry compression directive. Entry bytes are immutable once stored; writes
replace an entry wholesale, and :meth:`ZippedDocument.clone` produces a
document whose buffers are freshly copied so a clone and its source can be
mutated independently. Those two properties are what let many renders share a
single template safely.

Usage:
    doc = ZippedDocument.from_bytes(archive_bytes)
    with doc.get_entry_output_stream("xl/sharedStrings.xml") as out:
        out.write(payload)
    doc.save_file("report.xlsx")
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import os
import time
import uuid
import zipfile
import zlib
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Dict, List, Mapping, Optional, Union

from .compression import compression_for_entry, zip_compression
from .entries import EntryMap
from .errors import (
    DocumentArgumentError,
    DocumentReadError,
    EntryNotFoundError,
)
from .logging import get_logger, log_event
from .settings import get_settings
from .streams import EntryOutputStream, copy_stream

if TYPE_CHECKING:
    from ReportForge.Templating.interfaces import MergeEngine
    from ReportForge.Templating.template import ZippedTemplate

__all__ = ["ZippedDocument"]

logger = get_logger(__name__, base_fields={"component": "store"})

# Fixed member timestamp keeps saved archives byte-stable across runs.
_ENTRY_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


def _require_path(entry_path: Optional[str]) -> str:
    if not entry_path:
        raise DocumentArgumentError("entry_path")
    return entry_path


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000.0, 3)


class ZippedDocument:
    """A zip archive kept in memory as a ``path -> bytes`` entry store."""

    def __init__(self) -> None:
        self._entries = EntryMap()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_bytes(cls, data: bytes, **kwargs: Any) -> "ZippedDocument":
        """Build a document of this type and load it from an archive image."""

        if data is None:
            raise DocumentArgumentError("data")
        document = cls(**kwargs)
        document.load(io.BytesIO(data))
        return document

    @classmethod
    def from_base64_string(cls, text: str, **kwargs: Any) -> "ZippedDocument":
        """Inverse of :meth:`to_base64_string`."""

        if not text:
            raise DocumentArgumentError("text")
        try:
            data = base64.b64decode(text, validate=True)
        except binascii.Error as exc:
            raise DocumentArgumentError("text", f"Argument 'text' is not valid base64: {exc}") from exc
        return cls.from_bytes(data, **kwargs)

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------
    def load(self, in_stream: BinaryIO) -> None:
        """
        Replace this document's entries with every member of the archive ``in_stream``.

        Members are read into a staging map first; the store is swapped only
        once the whole archive has been read, so a failed load leaves the
        previous entries untouched.

        Raises:
            DocumentArgumentError: If ``in_stream`` is ``None``.
            DocumentReadError: If a member yields fewer bytes than its declared
                length, or the archive itself is corrupt.
        """

        if in_stream is None:
            raise DocumentArgumentError("in_stream")

        started = time.perf_counter()
        staged = self._read_archive(in_stream)
        self._entries.replace_all(staged)
        log_event(
            logger,
            "debug",
            "Loaded document archive",
            entry_count=len(staged),
            bytes=sum(len(data) for data in staged.values()),
            elapsed_ms=_elapsed_ms(started),
        )

    async def load_async(self, in_stream: BinaryIO) -> None:
        """Asynchronous :meth:`load`; archive I/O runs in a worker thread."""

        if in_stream is None:
            raise DocumentArgumentError("in_stream")
        await asyncio.to_thread(self.load, in_stream)

    @staticmethod
    def _read_archive(in_stream: BinaryIO) -> Dict[str, bytes]:
        if not in_stream.seekable():
            in_stream = io.BytesIO(in_stream.read())

        staged: Dict[str, bytes] = {}
        try:
            with zipfile.ZipFile(in_stream, "r") as archive:
                for info in archive.infolist():
                    buffer = io.BytesIO()
                    with archive.open(info, "r") as member:
                        nread = copy_stream(member, buffer)
                    if nread != info.file_size:
                        raise DocumentReadError(
                            f"Failed to read zip entry: {info.filename}",
                            entry_path=info.filename,
                            expected=info.file_size,
                            actual=nread,
                        )
                    staged[info.filename] = buffer.getvalue()
        except (zipfile.BadZipFile, EOFError, zlib.error) as exc:
            raise DocumentReadError(f"Failed to read document archive: {exc}") from exc
        return staged

    def save(self, out_stream: BinaryIO) -> None:
        """Write every entry to ``out_stream`` as a zip archive, one member at a time."""

        if out_stream is None:
            raise DocumentArgumentError("out_stream")

        started = time.perf_counter()
        snapshot = self._entries.snapshot()
        with zipfile.ZipFile(out_stream, "w") as archive:
            for entry_path, data in snapshot.items():
                self._write_member(archive, entry_path, data)
        log_event(
            logger,
            "debug",
            "Saved document archive",
            entry_count=len(snapshot),
            bytes=sum(len(data) for data in snapshot.values()),
            elapsed_ms=_elapsed_ms(started),
        )

    async def save_async(self, out_stream: BinaryIO) -> None:
        """Asynchronous :meth:`save`; archive I/O runs in a worker thread."""

        if out_stream is None:
            raise DocumentArgumentError("out_stream")
        await asyncio.to_thread(self.save, out_stream)

    def append_zip_entry(self, archive: zipfile.ZipFile, entry_path: str) -> None:
        """Write the stored entry ``entry_path`` into an archive opened for writing."""

        if archive is None:
            raise DocumentArgumentError("archive")
        self._write_member(archive, entry_path, self.get_entry_bytes(entry_path))

    @staticmethod
    def _write_member(archive: zipfile.ZipFile, entry_path: str, data: bytes) -> None:
        compression = zip_compression(compression_for_entry(entry_path))
        info = zipfile.ZipInfo(entry_path, date_time=_ENTRY_TIMESTAMP)
        info.compress_type = compression.compress_type
        if info.is_dir():
            info.external_attr = (0o40775 << 16) | 0x10
        else:
            info.external_attr = 0o600 << 16
        archive.writestr(
            info,
            data,
            compress_type=compression.compress_type,
            compresslevel=compression.compresslevel,
        )

    def load_file(self, path: Union[str, Path]) -> None:
        """Load this document from the archive file at ``path``."""

        with open(path, "rb") as handle:
            self.load(handle)

    def save_file(self, path: Union[str, Path]) -> Path:
        """Save this document to ``path``, atomically when ``atomic_writes`` is set."""

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        if not get_settings().atomic_writes:
            with target.open("wb") as handle:
                self.save(handle)
            return target

        tmp_path = target.with_name(f"{target.name}.tmp.{uuid.uuid4().hex}")
        try:
            with tmp_path.open("wb") as handle:
                self.save(handle)
                handle.flush()
                os.fsync(handle.fileno())
            tmp_path.replace(target)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return target

    # ------------------------------------------------------------------
    # Entry access
    # ------------------------------------------------------------------
    @property
    def entries(self) -> Mapping[str, bytes]:
        """Read-only live view of the entry store."""

        return self._entries

    @property
    def entry_paths(self) -> List[str]:
        """Snapshot of the stored entry paths; order is not guaranteed."""

        return self._entries.paths()

    def entry_exists(self, entry_path: str) -> bool:
        return _require_path(entry_path) in self._entries

    def get_entry_bytes(self, entry_path: str) -> bytes:
        data = self._entries.get(_require_path(entry_path))
        if data is None:
            raise EntryNotFoundError(entry_path)
        return data

    def put_entry_bytes(self, entry_path: str, data: bytes) -> None:
        if data is None:
            raise DocumentArgumentError("data")
        self._entries.put(_require_path(entry_path), data)

    def get_entry_input_stream(self, entry_path: str) -> io.BytesIO:
        """Return a readable stream over the current bytes of ``entry_path``.

        Later writes to the store are not visible through the returned stream.
        """

        return io.BytesIO(self.get_entry_bytes(entry_path))

    def get_entry_output_stream(self, entry_path: str) -> EntryOutputStream:
        """Return a writable stream that replaces ``entry_path`` on flush/close."""

        return EntryOutputStream(_require_path(entry_path), self._entries.put)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def get_buffer(self) -> bytes:
        """Serialize the whole document to an in-memory archive image."""

        with io.BytesIO() as buffer:
            self.save(buffer)
            return buffer.getvalue()

    def to_base64_string(self) -> str:
        return base64.b64encode(self.get_buffer()).decode("ascii")

    # ------------------------------------------------------------------
    # Cloning and copying
    # ------------------------------------------------------------------
    def _create_empty(self) -> "ZippedDocument":
        """Return an empty document of the same kind, used as the clone target."""

        return type(self)()

    def _clone_into(self, target: "ZippedDocument") -> "ZippedDocument":
        started = time.perf_counter()
        self.copy_to(target)
        log_event(
            logger,
            "debug",
            "Cloned document",
            source_type=type(self).__name__,
            target_type=type(target).__name__,
            entry_count=len(target.entries),
            elapsed_ms=_elapsed_ms(started),
        )
        return target

    def clone(self) -> "ZippedDocument":
        """Return an independent copy whose entry buffers share nothing with this one."""

        return self._clone_into(self._create_empty())

    def copy_to(self, dest_doc: "ZippedDocument") -> None:
        """Copy every entry into ``dest_doc``, overwriting entries with the same path."""

        if dest_doc is None:
            raise DocumentArgumentError("dest_doc")

        for entry_path, data in self._entries.snapshot().items():
            with io.BytesIO(data) as in_stream:
                with dest_doc.get_entry_output_stream(entry_path) as out_stream:
                    copy_stream(in_stream, out_stream)

    def compile(self, mergeable_entry: str, engine: Optional["MergeEngine"] = None) -> "ZippedTemplate":
        """Return a template over a copy of this document's entries.

        ``mergeable_entry`` names the entry whose UTF-8 text is merge source.
        """

        from ReportForge.Templating.template import ZippedTemplate

        template = ZippedTemplate(mergeable_entry=mergeable_entry, engine=engine)
        template.load_from_document(self)
        return template

    def __repr__(self) -> str:
        return f"{type(self).__name__}(entries={len(self._entries)})"
