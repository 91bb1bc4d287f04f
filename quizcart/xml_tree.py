"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

xml_tree.py

Lenient XML parsing into a plain mapping tree.

Cartridge manifests and QTI documents are read as nested dicts rather than
element objects, so that missing or unexpected markup never breaks
navigation:

    <item ident="q1" title="Capital">
      <presentation>
        <material><mattext texttype="text/html">&lt;p&gt;Paris?&lt;/p&gt;</mattext></material>
      </presentation>
    </item>

becomes

    {"item": {"ident": "q1", "title": "Capital",
              "presentation": {"material": {"mattext": {
                  "texttype": "text/html", "#": "<p>Paris?</p>"}}}}}

Rules:
- Attributes and child elements share one mapping (attributes first).
- Repeated names collapse into a list, in document order.
- An element with neither attributes nor children becomes its text.
- Otherwise its own text, if not blank, sits under the reserved "#" key.
- Namespace prefixes and URIs are dropped from all names.

Parsing is strict first (defusedxml, which refuses entity expansion and
external references). On a syntax error the text may be re-read with
BeautifulSoup's lxml-backed "xml" builder, which repairs unclosed and
mismatched tags. Only text with no recoverable root element fails.
Callers that must reject broken markup pass recover=False.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup, Tag
from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
)
from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DefusedET

from quizcart.errors import XmlParseError


TEXT_KEY = "#"

# A DOCTYPE with only an external id (no internal subset) carries nothing to expand
EXTERNAL_DOCTYPE_RE = re.compile(r"<!DOCTYPE[^\[>]*>")

# Markup that is never handed to the recovering parser
UNSAFE_MARKERS = ("<!DOCTYPE", "<!ENTITY")

# Text is already decoded; an encoding declaration would only mislead lxml
XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")

_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


# ============================================================================
# Names and node assembly
# ============================================================================

def local_name(name: str) -> str:
    """Drop a namespace URI ({uri}tag) or prefix (ns:tag) from a name."""
    if name.startswith("{"):
        name = name.split("}", 1)[1]
    return name.rsplit(":", 1)[-1]


def _add(node: Dict[str, Any], key: str, value: Any) -> None:
    """Insert value under key, turning repeats into a list."""
    if key not in node:
        node[key] = value
    elif isinstance(node[key], list):
        node[key].append(value)
    else:
        node[key] = [node[key], value]


def _finish(node: Dict[str, Any], text: str) -> Any:
    if not node:
        return text
    if text.strip():
        node[TEXT_KEY] = text
    return node


def _element_to_node(elem) -> Any:
    node: Dict[str, Any] = {}
    for key, value in elem.attrib.items():
        _add(node, local_name(key), value)

    text_parts = [elem.text or ""]
    for child in elem:
        # Comments and processing instructions have non-string tags
        if isinstance(child.tag, str):
            _add(node, local_name(child.tag), _element_to_node(child))
        text_parts.append(child.tail or "")

    return _finish(node, "".join(text_parts))


def _tag_to_node(tag: Tag) -> Any:
    node: Dict[str, Any] = {}
    for key, value in tag.attrs.items():
        # lxml reports namespace declarations as attributes
        if key == "xmlns" or str(key).startswith("xmlns:"):
            continue
        if isinstance(value, list):
            value = " ".join(value)
        _add(node, local_name(str(key)), str(value))

    text_parts = []
    for child in tag.children:
        if isinstance(child, Tag):
            _add(node, local_name(child.name), _tag_to_node(child))
        elif isinstance(child, NavigableString) and not isinstance(child, _SKIPPED_STRINGS):
            text_parts.append(str(child))

    return _finish(node, "".join(text_parts))


# ============================================================================
# Parsing
# ============================================================================

def _recover(text: str) -> Dict[str, Any]:
    """Best-effort parse of malformed XML."""
    text = EXTERNAL_DOCTYPE_RE.sub("", XML_DECLARATION_RE.sub("", text, count=1), count=1)
    if any(marker in text for marker in UNSAFE_MARKERS):
        raise XmlParseError("Malformed document with DTD content; not attempting recovery")

    try:
        soup = BeautifulSoup(text, "xml")
    except Exception as e:
        raise XmlParseError(f"Unrecoverable markup: {e}") from e

    root = next((child for child in soup.contents if isinstance(child, Tag)), None)
    if root is None:
        raise XmlParseError("No root element found")

    return {local_name(root.name): _tag_to_node(root)}


def parse_xml(text: str, recover: bool = True) -> Dict[str, Any]:
    """
    Parse XML text into a mapping tree {root_name: root_node}.

    With recover=False a syntax error is final instead of falling back to
    the repairing parser.

    Raises:
        XmlParseError: the text holds no recoverable element (or is not
            well-formed, when recover is False), or uses entity / DTD
            features that are refused for safety
    """
    if not text or not text.strip():
        raise XmlParseError("Empty document")

    try:
        root = DefusedET.fromstring(text)
    except DefusedXmlException as e:
        raise XmlParseError(f"Refusing unsafe XML: {e}")
    except DefusedET.ParseError as e:
        if not recover:
            raise XmlParseError(f"Not well-formed: {e}") from e
        return _recover(text)

    return {local_name(root.tag): _element_to_node(root)}


# ============================================================================
# Navigation
# ============================================================================

def one_or_many(value: Any) -> List[Any]:
    """Normalize a value that may be absent, single or repeated to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def first(value: Any) -> Any:
    """First entry of a one-or-many value, or None."""
    items = one_or_many(value)
    return items[0] if items else None


def dig(node: Any, *keys: str) -> Any:
    """
    Follow keys through nested mappings.

    Lists met on the way are entered at their first entry. Returns None as
    soon as a segment is missing or a node is not a mapping. The final
    value is returned as found (it may be a list).
    """
    for key in keys:
        if isinstance(node, list):
            node = first(node)
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def text_of(node: Any) -> Optional[str]:
    """Own text of a node: the node itself when it is a string, else its "#" entry."""
    if isinstance(node, list):
        node = first(node)
    if isinstance(node, str):
        return node
    if isinstance(node, dict):
        text = node.get(TEXT_KEY)
        return text if isinstance(text, str) else None
    return None


def attr(node: Any, name: str) -> Optional[str]:
    """String attribute of a node, or None."""
    if isinstance(node, list):
        node = first(node)
    if not isinstance(node, dict):
        return None
    value = node.get(name)
    return value if isinstance(value, str) else None
