"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

manifest.py

Read imsmanifest.xml and list the QTI assessment resources it declares.

    <manifest>
      <metadata><lomimscc:lom><lomimscc:general><lomimscc:title>
        <lomimscc:string>Biology 101</lomimscc:string>
      </lomimscc:title></lomimscc:general></lomimscc:lom></metadata>
      <resources>
        <resource identifier="r1" type="imsqti_xmlv1p2/imscc_xmlv1p3/assessment">
          <file href="r1/assessment_qti.xml"/>
        </resource>
      </resources>
    </manifest>
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from quizcart.errors import ManifestError, XmlParseError
from quizcart.models import NOT_AVAILABLE
from quizcart.xml_tree import attr, dig, first, one_or_many, parse_xml, text_of


MANIFEST_FILENAME = "imsmanifest.xml"
ASSESSMENT_TYPE = "imsqti_xmlv1p2/imscc_xmlv1p3/assessment"

# Below <manifest>; namespace prefixes are already dropped by parse_xml
SUBJECT_PATH = ("metadata", "lom", "general", "title", "string")


@dataclass(frozen=True)
class AssessmentResource:
    """An assessment document inside the package."""
    type_tag: str
    relative_file_path: str
    identifier: str = ""


def load_manifest(package_root: Path) -> Dict[str, Any]:
    """
    Parse <package_root>/imsmanifest.xml into a mapping tree.

    The manifest is parsed strictly: markup that is not well-formed is
    rejected rather than repaired.

    Raises:
        ManifestError: the manifest is missing, unreadable or unparsable
    """
    manifest_path = package_root / MANIFEST_FILENAME

    if not manifest_path.is_file():
        raise ManifestError(f"No {MANIFEST_FILENAME} found in cartridge")

    try:
        xml_text = manifest_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read {MANIFEST_FILENAME}: {e}")

    try:
        return parse_xml(xml_text, recover=False)
    except XmlParseError as e:
        raise ManifestError(f"Failed to parse {MANIFEST_FILENAME}: {e}")


def resolve_subject(manifest_tree: Dict[str, Any]) -> str:
    """Course title from the LOM metadata, or "N/A"."""
    subject = text_of(dig(manifest_tree, "manifest", *SUBJECT_PATH))
    if subject is None or not subject.strip():
        return NOT_AVAILABLE
    return subject.strip()


def resolve_assessments(manifest_tree: Dict[str, Any]) -> List[AssessmentResource]:
    """Assessment resources in manifest order; entries without a file href are dropped."""
    resources = one_or_many(dig(manifest_tree, "manifest", "resources", "resource"))

    result = []
    for resource in resources:
        if attr(resource, "type") != ASSESSMENT_TYPE:
            continue

        href = attr(first(dig(resource, "file")), "href")
        if not href:
            continue

        result.append(AssessmentResource(
            type_tag=ASSESSMENT_TYPE,
            relative_file_path=href,
            identifier=attr(resource, "identifier") or "",
        ))

    return result
