#!/usr/bin/env python3
"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

extract_quizzes.py

Extract quizzes from an IMS Common Cartridge file as JSON.

Usage:
    python -m quizcart.extract_quizzes <cartridge.imscc> [--output FILE] [--config FILE]

Options:
    --output    Write JSON to FILE instead of stdout
    --config    Path to quizcart.yaml (default: ./quizcart.yaml or $QUIZCART_CONFIG)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from quizcart.config_utils import load_settings
from quizcart.errors import ConfigurationError, InputError, ManifestError
from quizcart.icons import ERROR, SUCCESS, WARNING
from quizcart.pipeline import process_upload


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Extract quizzes from an IMS Common Cartridge file as JSON"
    )
    parser.add_argument(
        "cartridge",
        type=Path,
        help="Path to .imscc cartridge file"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Write JSON here (default: stdout)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to quizcart.yaml"
    )

    args = parser.parse_args(argv)

    if args.cartridge.suffix.lower() != ".imscc":
        print(f"{WARNING} Warning: File does not have .imscc extension", file=sys.stderr)

    try:
        settings = load_settings(args.config)
        result = process_upload(args.cartridge, settings)
    except ConfigurationError as e:
        print(f"{ERROR} Configuration error: {e}", file=sys.stderr)
        return 1
    except InputError as e:
        print(f"{ERROR} Invalid cartridge: {e}", file=sys.stderr)
        return 1
    except ManifestError as e:
        print(f"{ERROR} Manifest error: {e}", file=sys.stderr)
        return 1

    payload = result.to_json()
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload + "\n", encoding="utf-8")
        print(f"[extract] {SUCCESS} Wrote {len(result.quizzes)} quiz(zes) to {args.output}", file=sys.stderr)
    else:
        print(payload)

    return 0


if __name__ == "__main__":
    sys.exit(main())
