"""
backend/tests/conftest.py

Purpose:
    Shared pytest bootstrap for import paths used by the matka package and
    the command-line scripts.
"""

from __future__ import annotations

import sys
from pathlib import Path

_THIS_FILE = Path(__file__).resolve()
_BACKEND_DIR = _THIS_FILE.parents[1]
_SCRIPTS_DIR = _BACKEND_DIR / "scripts"

for candidate in (str(_BACKEND_DIR), str(_SCRIPTS_DIR)):
    if candidate not in sys.path:
        sys.path.insert(0, candidate)
