"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

cartridge.py

Scratch space and archive unpacking for one extraction request.

SECURITY:
- Member names are validated to prevent path traversal
- Size and file-count limits guard against zip bombs
- Compression ratios are checked for suspicious members
"""

from __future__ import annotations

import shutil
import sys
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from quizcart.config_utils import Settings
from quizcart.errors import InputError
from quizcart.icons import WARNING
from quizcart.security_utils import is_safe_path


SCRATCH_PREFIX = "imscc-"

# Characters no exported cartridge uses in a member name
FORBIDDEN_NAME_CHARS = ("\0", "<", ">", "|", "?", "*")


def unsafe_member_reason(member: str) -> Optional[str]:
    """Why an archive member name must not be extracted, or None if it is acceptable."""
    if not member:
        return "empty name"
    if member.startswith(("/", "\\")):
        return "absolute path"
    if len(member) >= 2 and member[1] == ":":
        return "drive-qualified path"
    if ".." in member.replace("\\", "/").split("/"):
        return "parent directory reference"
    if any(char in member for char in FORBIDDEN_NAME_CHARS):
        return "forbidden character"
    return None


@contextmanager
def scratch_directory(settings: Optional[Settings] = None) -> Iterator[Path]:
    """
    Allocate an empty, uniquely named directory and remove it on exit.

    Removal happens whether the body succeeds or raises.
    """
    base = settings.scratch_dir if settings else None
    if base:
        Path(base).mkdir(parents=True, exist_ok=True)

    temp_dir = Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX, dir=base))
    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            shutil.rmtree(temp_dir)


def extract_cartridge(
    archive_path: Path,
    dest_dir: Path,
    settings: Optional[Settings] = None,
) -> int:
    """
    Unpack every acceptable archive member under dest_dir.

    Directory members are created empty. Unsafe, oversized or suspiciously
    compressed members are skipped with a warning.

    Returns:
        Number of members written

    Raises:
        InputError: missing file, not a zip, or archive over the limits
    """
    settings = settings or Settings()

    if not archive_path.is_file():
        raise InputError(f"Archive not found: {archive_path}")

    try:
        with zipfile.ZipFile(archive_path, 'r') as zf:
            infos = zf.infolist()

            if len(infos) > settings.max_files:
                raise InputError(f"Cartridge contains too many files: {len(infos)}")

            total_size = sum(info.file_size for info in infos)
            if total_size > settings.max_total_size:
                raise InputError(
                    f"Cartridge too large: {total_size / (1024*1024):.1f} MB "
                    f"(max {settings.max_total_size / (1024*1024):.0f} MB)"
                )

            extracted = 0
            extracted_size = 0
            for info in infos:
                member = info.filename

                if info.file_size > settings.max_file_size:
                    print(f"[extract:warn] {WARNING} Skipping large file: {member} "
                          f"({info.file_size / (1024*1024):.1f} MB)", file=sys.stderr)
                    continue

                if info.file_size > 0 and info.compress_size > 0:
                    ratio = info.file_size / info.compress_size
                    if ratio > settings.max_compression_ratio:
                        print(f"[extract:warn] {WARNING} Suspicious compression: {member} ({ratio:.0f}x)",
                              file=sys.stderr)
                        continue

                reason = unsafe_member_reason(member)
                if reason:
                    print(f"[extract:warn] {WARNING} Skipping unsafe member name ({reason}): {member!r}",
                          file=sys.stderr)
                    continue

                if not is_safe_path(dest_dir, dest_dir / member):
                    print(f"[extract:warn] {WARNING} Path escapes scratch directory: {member}", file=sys.stderr)
                    continue

                zf.extract(info, dest_dir)
                extracted += 1

                extracted_size += info.file_size
                if extracted_size > settings.max_total_size:
                    raise InputError("Extracted size exceeds limit during extraction")

    except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
        raise InputError(f"Not a valid cartridge archive: {e}")
    except (OSError, zlib.error) as e:
        raise InputError(f"Failed to extract cartridge: {e}")

    return extracted
