"""Per-entry compression policy applied when a document is saved."""

from __future__ import annotations

import posixpath
import zipfile
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .settings import get_settings

__all__ = [
    "CompressionDirective",
    "ZipCompression",
    "compression_for_entry",
    "entry_extension",
    "zip_compression",
]


class CompressionDirective(str, Enum):
    """How an entry is written into the archive."""

    NO_COMPRESSION = "no_compression"
    FASTEST = "fastest"


@dataclass(frozen=True)
class ZipCompression:
    """``zipfile`` arguments that realise a :class:`CompressionDirective`."""

    compress_type: int
    compresslevel: Optional[int]


def entry_extension(entry_path: str) -> str:
    """Return the lower-case extension of ``entry_path`` without its dot."""

    _, ext = posixpath.splitext(posixpath.basename(entry_path or ""))
    return ext[1:].lower()


def compression_for_entry(
    entry_path: str, stored_extensions: Optional[Iterable[str]] = None
) -> CompressionDirective:
    """Map an entry path to its compression directive.

    Already compressed media (``jpeg``, ``jpg``, ``png``, ``mp3``, ``mp4`` by
    default, any case) is stored as-is; everything else, including paths with
    no extension, is deflated at the fastest level. Never raises.
    """

    if stored_extensions is None:
        stored_extensions = get_settings().stored_extensions
    stored = {str(ext).lstrip(".").lower() for ext in stored_extensions}
    if entry_extension(entry_path) in stored:
        return CompressionDirective.NO_COMPRESSION
    return CompressionDirective.FASTEST


def zip_compression(directive: CompressionDirective, deflate_level: Optional[int] = None) -> ZipCompression:
    """Translate ``directive`` into ``zipfile`` compression arguments."""

    if directive is CompressionDirective.NO_COMPRESSION:
        return ZipCompression(zipfile.ZIP_STORED, None)
    level = get_settings().deflate_level if deflate_level is None else deflate_level
    return ZipCompression(zipfile.ZIP_DEFLATED, level)
