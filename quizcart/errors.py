"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

errors.py

Exception hierarchy for cartridge quiz extraction.

Only InputError and ManifestError abort a request. ResourceSkip is raised
for one assessment resource and absorbed by the pipeline.
"""


class QuizcartError(Exception):
    """Base class for all quizcart errors"""
    pass


class ConfigurationError(QuizcartError):
    """Invalid or unreadable quizcart.yaml / environment settings"""
    pass


class InputError(QuizcartError):
    """No archive supplied, or the archive is not a usable zip file"""
    pass


class ManifestError(QuizcartError):
    """imsmanifest.xml is missing or cannot be parsed"""
    pass


class XmlParseError(QuizcartError):
    """XML text could not be turned into a tree at all"""
    pass


class ResourceSkip(QuizcartError):
    """One assessment resource cannot be extracted and is left out"""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
