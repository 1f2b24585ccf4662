"""
Structured logging helpers for document and template operations.

Entry stores and templates emit a handful of DEBUG events (load, save, clone,
render) carrying sizes and timings. The helpers here keep those records
consistent: a JSON formatter for machine-readable sinks, and a logger adapter
that merges bound context into ``extra_fields``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .settings import LogFormat, get_settings

__all__ = ["JSONFormatter", "StructuredLogger", "get_logger", "log_event"]


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Render ``record`` as a JSON string including structured fields."""

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            payload.update(extra_fields)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter carrying fields shared by every document event it emits.

    Bound fields (for example ``component="store"``) are merged under the
    per-call fields, so an event can override them without mutating the adapter.
    """

    def __init__(
        self, logger: logging.Logger, base_fields: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(logger, {})
        self.base_fields: Dict[str, Any] = dict(base_fields or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        """Merge adapter context into ``extra`` metadata for structured output."""

        extra = kwargs.setdefault("extra", {})
        fields = {**self.base_fields, **(extra.get("extra_fields") or {})}
        extra["extra_fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **fields: object) -> "StructuredLogger":
        """Attach additional persistent fields to the adapter and return ``self``."""

        self.base_fields.update({k: v for k, v in fields.items() if v is not None})
        return self


def get_logger(
    name: str, level: Optional[str] = None, *, base_fields: Optional[Dict[str, Any]] = None
) -> StructuredLogger:
    """Return a structured logger configured from :func:`get_settings`."""

    settings = get_settings()
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        if settings.log_format is LogFormat.JSON:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    resolved = (level or settings.log_level.value).upper()
    logger.setLevel(getattr(logging, resolved, logging.INFO))
    adapter = getattr(logger, "_reportforge_adapter", None)
    if not isinstance(adapter, StructuredLogger):
        adapter = StructuredLogger(logger, base_fields)
        setattr(logger, "_reportforge_adapter", adapter)
    elif base_fields:
        adapter.bind(**base_fields)
    return adapter


def log_event(logger: logging.LoggerAdapter | logging.Logger, level: str, message: str, **fields: object) -> None:
    """Emit a structured log record using the ``extra_fields`` convention."""

    normalised_level = str(level).lower()
    emitter = getattr(logger, normalised_level, None)
    if not callable(emitter):
        raise AttributeError(f"Logger has no level '{level}'")
    if not logger.isEnabledFor(getattr(logging, normalised_level.upper(), logging.INFO)):
        return
    emitter(message, extra={"extra_fields": fields})
