"""
Tests for the HTTP upload adapter.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from quizcart.config_utils import Settings
from quizcart.server import create_app


@pytest.fixture
def scratch(tmp_path):
    return tmp_path / "scratch"


@pytest.fixture
def client(scratch):
    return TestClient(create_app(Settings(scratch_dir=str(scratch))))


def upload(client, archive: Path, field="imsccFile", route="/upload"):
    with archive.open("rb") as fh:
        return client.post(route, files={field: (archive.name, fh, "application/zip")})


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize("route", ["/upload", "/api/upload"])
def test_upload_returns_quizzes(client, sample_cartridge, route):
    response = upload(client, sample_cartridge, route=route)

    assert response.status_code == 200
    data = response.json()
    assert data["subject"] == "Biology 101"
    assert [quiz["title"] for quiz in data["quizzes"]] == [
        "Unit 1 Quiz",
        "Single Item Quiz (No Assessment Tag)",
    ]


def test_missing_file_field(client, sample_cartridge):
    response = upload(client, sample_cartridge, field="somethingElse")

    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded."}


def test_invalid_archive_is_client_error(client, tmp_path):
    bogus = tmp_path / "bogus.imscc"
    bogus.write_bytes(b"not a zip")

    response = upload(client, bogus)
    assert response.status_code == 400


def test_manifest_failure_is_server_error(client, build_cartridge):
    archive = build_cartridge({"readme.txt": "no manifest"})

    response = upload(client, archive)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process file"}


def test_malformed_manifest_is_server_error(client, build_cartridge, qti):
    archive = build_cartridge({
        "imsmanifest.xml": qti.truncated_manifest_xml([("r1", qti.ASSESSMENT_TYPE, "r1/a.xml")]),
        "r1/a.xml": qti.wrap_assessment([qti.MC_ITEM]),
    })

    response = upload(client, archive)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process file"}


def test_staged_upload_and_scratch_are_removed(client, sample_cartridge, build_cartridge, scratch):
    upload(client, sample_cartridge)
    upload(client, build_cartridge({"readme.txt": "x"}, name="broken.imscc"))

    assert list(scratch.iterdir()) == []


def test_custom_field_name(tmp_path, sample_cartridge):
    app = create_app(Settings(upload_field="cartridge", scratch_dir=str(tmp_path / "s")))
    response = upload(TestClient(app), sample_cartridge, field="cartridge")
    assert response.status_code == 200
