"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

server.py

HTTP upload adapter around quizcart.pipeline.process_upload.

Endpoints:
    POST /upload, POST /api/upload
        multipart form with one cartridge under the configured field
        (default "imsccFile"); responds with the extraction JSON
    GET /health

Run:
    quizcart-serve [--config quizcart.yaml]
    uvicorn --factory quizcart.server:create_app
"""

from __future__ import annotations

import argparse
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, File, UploadFile
from fastapi.responses import JSONResponse

from quizcart import __version__
from quizcart.config_utils import Settings, load_settings
from quizcart.errors import ConfigurationError, InputError, ManifestError
from quizcart.icons import ERROR
from quizcart.pipeline import process_upload


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app; settings default to load_settings()."""
    settings = settings or load_settings()
    app = FastAPI(title="quizcart", version=__version__)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    def upload(
        archive: Optional[UploadFile] = File(None, alias=settings.upload_field),
    ) -> JSONResponse:
        if archive is None:
            return _error(400, "No file uploaded.")

        if settings.scratch_dir:
            Path(settings.scratch_dir).mkdir(parents=True, exist_ok=True)
        staged = tempfile.NamedTemporaryFile(
            prefix="upload-", suffix=".imscc", dir=settings.scratch_dir, delete=False
        )
        try:
            with staged:
                shutil.copyfileobj(archive.file, staged)

            result = process_upload(Path(staged.name), settings)
            return JSONResponse(content=result.to_dict())

        except InputError as e:
            print(f"[server:warn] {ERROR} Rejected upload {archive.filename}: {e}", file=sys.stderr)
            return _error(400, "Invalid cartridge file.")
        except ManifestError as e:
            print(f"[server:err] {ERROR} {archive.filename}: {e}", file=sys.stderr)
            return _error(500, "Failed to process file")
        except Exception as e:
            print(f"[server:err] {ERROR} Unexpected failure for {archive.filename}: {e!r}", file=sys.stderr)
            return _error(500, "Failed to process file")
        finally:
            if os.path.exists(staged.name):
                os.unlink(staged.name)

    app.add_api_route("/upload", upload, methods=["POST"])
    app.add_api_route("/api/upload", upload, methods=["POST"])

    return app


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Serve the cartridge quiz extractor over HTTP")
    parser.add_argument("--config", type=Path, default=None, help="Path to quizcart.yaml")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigurationError as e:
        print(f"{ERROR} Configuration error: {e}", file=sys.stderr)
        return 1

    import uvicorn  # Lazy import - only needed when serving

    print(f"[server] Listening on http://{settings.host}:{settings.port}", file=sys.stderr)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
