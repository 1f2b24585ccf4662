"""Stream helpers used by the entry store: bounded copies and committing writers."""

from __future__ import annotations

import io
from typing import BinaryIO, Callable, Optional

from .errors import DocumentArgumentError
from .settings import get_settings

__all__ = ["EntryOutputStream", "copy_stream"]


def copy_stream(source: BinaryIO, destination: BinaryIO, buffer_size: Optional[int] = None) -> int:
    """
    Copy ``source`` into ``destination`` in fixed-size chunks.

    Neither stream is closed; the caller owns both lifetimes.

    Args:
        source: Readable binary stream, consumed until exhausted.
        destination: Writable binary stream receiving each chunk in order.
        buffer_size: Chunk size in bytes (defaults to ``copy_buffer_size``, 2048).

    Returns:
        Number of bytes copied.

    Raises:
        DocumentArgumentError: If either stream is ``None``.
    """

    if source is None:
        raise DocumentArgumentError("source")
    if destination is None:
        raise DocumentArgumentError("destination")

    chunk_size = buffer_size or get_settings().copy_buffer_size
    total = 0
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        destination.write(chunk)
        total += len(chunk)
    return total


class EntryOutputStream(io.BytesIO):
    """In-memory writer whose flush/close replaces one stored entry wholesale.

    ``commit`` receives the complete buffer contents as a fresh ``bytes``
    object, so the store never aliases this stream's internal buffer.
    """

    def __init__(self, entry_path: str, commit: Callable[[str, bytes], None]) -> None:
        super().__init__()
        self.entry_path = entry_path
        self._commit = commit

    def flush(self) -> None:
        super().flush()
        self._commit(self.entry_path, self.getvalue())

    def close(self) -> None:
        if not self.closed:
            self.flush()
        super().close()
