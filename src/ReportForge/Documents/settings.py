# === NAVMAP v1 ===
# {
#   "module": "ReportForge.Documents.settings",
#   "purpose": "Pydantic v2 settings for the document store and renderer.",
#   "sections": [
#     {"id": "loglevel", "name": "LogLevel", "anchor": "class-loglevel", "kind": "class"},
#     {"id": "logformat", "name": "LogFormat", "anchor": "class-logformat", "kind": "class"},
#     {"id": "documentsettings", "name": "DocumentSettings", "anchor": "class-documentsettings", "kind": "class"},
#     {"id": "get-settings", "name": "get_settings", "anchor": "function-get-settings", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""
Typed settings for ReportForge documents.

Values resolve from keyword overrides, then ``REPORTFORGE_*`` environment
variables, then the defaults below. The compression policy, copy buffer, and
file-save behaviour read their defaults from here so operators can widen the
stored-media set or tune the deflate level without touching code.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

__all__ = [
    "DEFAULT_STORED_EXTENSIONS",
    "DocumentSettings",
    "LogFormat",
    "LogLevel",
    "get_settings",
    "reset_settings",
]

DEFAULT_STORED_EXTENSIONS: tuple[str, ...] = ("jpeg", "jpg", "png", "mp3", "mp4")


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Supported log output formats."""

    CONSOLE = "console"
    JSON = "json"


class DocumentSettings(BaseSettings):
    """Settings shared by entry stores, templates, and their loggers."""

    model_config = SettingsConfigDict(
        env_prefix="REPORTFORGE_",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = Field(LogLevel.INFO, description="Logging level for ReportForge loggers")
    log_format: LogFormat = Field(
        LogFormat.CONSOLE, description="Pretty console or structured JSON"
    )
    copy_buffer_size: int = Field(
        2048, ge=1, description="Chunk size in bytes used when copying entry streams"
    )
    stored_extensions: Annotated[tuple[str, ...], NoDecode] = Field(
        DEFAULT_STORED_EXTENSIONS,
        description="Entry extensions saved without compression (already compressed media)",
    )
    deflate_level: int = Field(
        1, ge=1, le=9, description="Deflate level used for every other entry (1 = fastest)"
    )
    atomic_writes: bool = Field(
        True, description="Write document files via temporary files and atomic os.replace"
    )

    @field_validator("stored_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, value: Any) -> tuple[str, ...]:
        """Accept comma separated strings and strip dots/case from each extension."""

        if value is None:
            return DEFAULT_STORED_EXTENSIONS
        if isinstance(value, str):
            value = value.split(",")
        normalized = []
        for item in value:
            ext = str(item).strip().lstrip(".").lower()
            if ext and ext not in normalized:
                normalized.append(ext)
        return tuple(normalized)


_SETTINGS: Optional[DocumentSettings] = None
_SETTINGS_LOCK = threading.Lock()


def get_settings() -> DocumentSettings:
    """Return the process-wide settings, building them from the environment once."""

    global _SETTINGS
    with _SETTINGS_LOCK:
        if _SETTINGS is None:
            _SETTINGS = DocumentSettings()
        return _SETTINGS


def reset_settings(settings: Optional[DocumentSettings] = None) -> None:
    """Drop the cached settings, optionally installing ``settings`` in their place."""

    global _SETTINGS
    with _SETTINGS_LOCK:
        _SETTINGS = settings
