"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

sanitize.py

Markup stripping for free-text QTI fields (question stems, choice labels).
"""

from __future__ import annotations

import re
from typing import Optional

# A dangling "<" with no closing ">" swallows the rest of the text.
TAG_RE = re.compile(r"<[^>]*>?", re.MULTILINE)


def sanitize(raw: Optional[str]) -> str:
    """Strip all <...> markup and surrounding whitespace."""
    if not raw:
        return ""
    return TAG_RE.sub("", raw).strip()
