# === NAVMAP v1 ===
# {
#   "module": "ReportForge.Documents.__init__",
#   "purpose": "Entry store for zip-packaged office documents.",
#   "sections": []
# }
# === /NAVMAP ===

"""
Zip-packaged office documents as in-memory entry stores.

Exposes :class:`ZippedDocument` together with the compression policy, the
bounded stream copier, the settings model, and the exception hierarchy.
"""

from .compression import CompressionDirective, compression_for_entry, entry_extension
from .errors import (
    DocumentArgumentError,
    DocumentReadError,
    EntryNotFoundError,
    ReportForgeError,
    UnsupportedOperationError,
)
from .settings import DocumentSettings, get_settings, reset_settings
from .streams import EntryOutputStream, copy_stream
from .zipped import ZippedDocument

__all__ = [
    "CompressionDirective",
    "DocumentArgumentError",
    "DocumentReadError",
    "DocumentSettings",
    "EntryNotFoundError",
    "EntryOutputStream",
    "ReportForgeError",
    "UnsupportedOperationError",
    "ZippedDocument",
    "compression_for_entry",
    "copy_stream",
    "entry_extension",
    "get_settings",
    "reset_settings",
]
