"""Shared fixtures for the ReportForge document and template suites."""

from __future__ import annotations

import io
import zipfile
from typing import Callable, Dict

import pytest

from ReportForge.Documents import reset_settings

ArchiveFactory = Callable[..., bytes]


def build_archive(entries: Dict[str, bytes], compression: int = zipfile.ZIP_STORED) -> bytes:
    """Return a zip archive image containing ``entries``."""

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def fresh_settings():
    """Drop cached settings before and after the test."""

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_archive() -> ArchiveFactory:
    return build_archive


@pytest.fixture
def template_entries() -> Dict[str, bytes]:
    return {
        "sheet1.xml": b"Hello $name",
        "styles.xml": b"<style/>",
        "media/logo.png": bytes(range(256)),
    }
