"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

pipeline.py

Extraction pipeline for one uploaded cartridge:

    unpack archive -> parse imsmanifest.xml -> for each assessment resource
    (manifest order) parse its QTI document -> collect quizzes

Only InputError (bad archive) and ManifestError (bad manifest) abort a
request. A resource whose file is missing, unreadable or not a QTI
assessment is reported and left out.

Usage:
    from quizcart.pipeline import process_upload

    result = process_upload(Path("course.imscc"))
    print(result.to_json())
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Optional

from quizcart.assessment import parse_assessment
from quizcart.cartridge import extract_cartridge, scratch_directory
from quizcart.config_utils import Settings
from quizcart.errors import InputError, ResourceSkip, XmlParseError
from quizcart.icons import PACKAGE, QUIZ, WARNING
from quizcart.manifest import (
    AssessmentResource,
    load_manifest,
    resolve_assessments,
    resolve_subject,
)
from quizcart.models import PackageResult, Quiz
from quizcart.security_utils import is_safe_path


def read_assessment(package_root: Path, resource: AssessmentResource) -> Quiz:
    """
    Load and parse the QTI document behind one resource.

    Raises:
        ResourceSkip: the resource cannot contribute a quiz
    """
    rel_path = resource.relative_file_path
    xml_path = package_root / rel_path

    if not is_safe_path(package_root, xml_path):
        raise ResourceSkip(rel_path, "path points outside the package")
    if not xml_path.is_file():
        raise ResourceSkip(rel_path, "file not found in package")

    try:
        xml_text = xml_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceSkip(rel_path, f"unreadable: {e}")

    try:
        quiz = parse_assessment(xml_text)
    except XmlParseError as e:
        raise ResourceSkip(rel_path, f"unparsable XML: {e}")

    if quiz is None:
        raise ResourceSkip(rel_path, "no questestinterop assessment or items")

    return quiz


def extract_package(package_root: Path, manifest_tree: Dict[str, Any]) -> PackageResult:
    """Build the package result from an unpacked cartridge and its parsed manifest."""
    result = PackageResult(subject=resolve_subject(manifest_tree))

    resources = resolve_assessments(manifest_tree)
    print(f"[extract] {PACKAGE} Found {len(resources)} assessment resource(s)", file=sys.stderr)

    for resource in resources:
        try:
            quiz = read_assessment(package_root, resource)
        except ResourceSkip as e:
            print(f"[extract:warn] {WARNING} Skipping {e.path}: {e.reason}", file=sys.stderr)
            continue

        print(f"[extract] {QUIZ} {quiz.title} ({len(quiz.items)} items)", file=sys.stderr)
        result.quizzes.append(quiz)

    return result


def process_upload(archive_path: Optional[Path], settings: Optional[Settings] = None) -> PackageResult:
    """
    Extract all quizzes from an IMSCC archive.

    The scratch directory used for unpacking is removed before returning,
    on success and on failure.

    Raises:
        InputError: no archive given, or it is not a usable zip file
        ManifestError: imsmanifest.xml is missing or unparsable
    """
    if archive_path is None:
        raise InputError("No file uploaded.")

    archive_path = Path(archive_path)

    with scratch_directory(settings) as temp_dir:
        count = extract_cartridge(archive_path, temp_dir, settings)
        print(f"[extract] Unpacked {count} member(s) from {archive_path.name}", file=sys.stderr)

        manifest_tree = load_manifest(temp_dir)
        return extract_package(temp_dir, manifest_tree)
