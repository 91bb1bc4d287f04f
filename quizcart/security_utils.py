"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

security_utils.py

Containment check for paths built from archive members and manifest hrefs.
"""

from __future__ import annotations

from pathlib import Path


def is_safe_path(root: Path, candidate: Path) -> bool:
    """True if candidate resolves to a location inside root."""
    try:
        candidate.resolve().relative_to(root.resolve())
    except (ValueError, OSError):
        return False
    return True
