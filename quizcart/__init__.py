"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

Quiz extraction from IMS Common Cartridge packages.
"""

from quizcart.pipeline import extract_package, process_upload

__all__ = ["extract_package", "process_upload"]
__version__ = "0.1.0"
