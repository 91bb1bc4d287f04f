"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

assessment.py

Parse one QTI 1.2 assessment document into a Quiz.

Two document shapes are accepted under <questestinterop>:

- <assessment title="..."><section><item/>...</section></assessment>
- bare <item/> elements with no assessment wrapper (single-item exports)

Anything else yields None: the document is not an extractable quiz.
"""

from __future__ import annotations

from typing import Any, List, Optional

from quizcart.classifier import classify
from quizcart.models import Quiz
from quizcart.xml_tree import attr, one_or_many, parse_xml


ROOT_TAG = "questestinterop"
UNTITLED_ASSESSMENT = "N/A (Title not found)"
SINGLE_ITEM_TITLE = "Single Item Quiz (No Assessment Tag)"


def assessment_items(assessment: Any) -> List[Any]:
    """Items of every <section>, in document order."""
    if not isinstance(assessment, dict):
        return []

    items = []
    for section in one_or_many(assessment.get("section")):
        if isinstance(section, dict):
            items.extend(one_or_many(section.get("item")))
    return items


def parse_assessment(xml_text: str) -> Optional[Quiz]:
    """
    Parse assessment XML text into a Quiz.

    Returns:
        Quiz, or None when the document has no <questestinterop> container
        or the container holds neither an assessment nor items

    Raises:
        XmlParseError: the text is not recoverable as XML
    """
    tree = parse_xml(xml_text)

    container = tree.get(ROOT_TAG)
    if not isinstance(container, dict):
        return None

    if "assessment" in container:
        assessment = one_or_many(container["assessment"])[0]
        title = attr(assessment, "title") or UNTITLED_ASSESSMENT
        raw_items = assessment_items(assessment)
    elif "item" in container:
        title = SINGLE_ITEM_TITLE
        raw_items = one_or_many(container["item"])
    else:
        return None

    return Quiz(title=title, items=[classify(item) for item in raw_items])
