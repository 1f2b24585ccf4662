"""
Pytest Configuration

Puts ``src`` on ``sys.path`` so the suites run against the working tree even
when the package has not been installed.

Usage:
    pytest tests/
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
