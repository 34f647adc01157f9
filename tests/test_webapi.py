"""HTTP level tests for the convert endpoint."""

import base64
import logging

import pytest
from fastapi.testclient import TestClient

from xliff_service import webapi
from xliff_service.conversion import ConversionService, UnsupportedFormatError


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_convert_docx(client, projects):
    files = {"file": ("report.docx", b"Annual report text", "application/octet-stream")}

    resp = client.post("/convert/en/fr", files=files)

    assert resp.status_code == 200
    body = resp.json()
    assert body["filename"] == "report.docx.xlf"
    xlf = base64.b64decode(body["document_content"])
    assert b'source-language="en"' in xlf
    assert b'target-language="fr"' in xlf
    assert b"Annual report text" in xlf
    assert list(projects.base_dir.iterdir()) == []


def test_language_tags_are_case_insensitive(client, engine):
    files = {"file": ("a.txt", b"hi", "text/plain")}

    resp = client.post("/convert/EN-us/FR-ca", files=files)

    assert resp.status_code == 200
    assert engine.calls[0][:2] == ("en-US", "fr-CA")


def test_invalid_source_language(client, engine):
    files = {"file": ("report.docx", b"data", "application/octet-stream")}

    resp = client.post("/convert/xx/fr", files=files)

    assert resp.status_code == 400
    assert resp.json() == {"message": "The language 'xx' is not valid"}
    assert engine.calls == []


def test_missing_file_part(client, projects, engine):
    resp = client.post("/convert/en/fr", files={"attachment": ("report.docx", b"data", "application/octet-stream")})

    assert resp.status_code == 400
    assert resp.json() == {"message": "The input file has not been sent"}
    assert engine.calls == []
    assert not projects.base_dir.exists()


def test_empty_body(client):
    resp = client.post("/convert/en/fr")
    assert resp.status_code == 400
    assert resp.json() == {"message": "The input file has not been sent"}


def test_unsupported_format(monkeypatch, client, make_service, projects, caplog):
    service, _ = make_service(UnsupportedFormatError("The format 'exe' is not supported"))
    monkeypatch.setattr(webapi, "SERVICE", service)

    with caplog.at_level(logging.INFO):
        resp = client.post("/convert/en/fr", files={"file": ("setup.exe", b"MZ", "application/octet-stream")})

    assert resp.status_code == 400
    assert resp.json() == {"message": "The format 'exe' is not supported"}
    failed = [r for r in caplog.records if "[CONVERSION REQUEST FAILED]" in r.getMessage()]
    assert failed and all(r.exc_info is None for r in failed)
    assert list(projects.base_dir.iterdir()) == []


def test_internal_fault_is_still_bad_request(monkeypatch, client, make_service, projects):
    service, _ = make_service(OSError("disk full"))
    monkeypatch.setattr(webapi, "SERVICE", service)

    resp = client.post("/convert/en/fr", files={"file": ("report.docx", b"data", "application/octet-stream")})

    assert resp.status_code == 400
    assert resp.json() == {"message": "disk full"}
    assert list(projects.base_dir.iterdir()) == []


def test_path_traversal_filename(client, engine):
    files = {"file": ("../../etc/passwd", b"root:x:0:0", "text/plain")}

    resp = client.post("/convert/en/fr", files=files)

    assert resp.status_code == 200
    assert resp.json()["filename"] == "passwd.xlf"
    assert engine.calls[0][2].name == "passwd"


@pytest.mark.parametrize("path", ["/convert/en", "/convert"])
def test_incomplete_paths_are_not_found(client, path):
    resp = client.post(path, files={"file": ("a.txt", b"x", "text/plain")})
    assert resp.status_code == 404


def test_startup_keeps_injected_service(monkeypatch, tmp_path, service):
    monkeypatch.setattr(webapi, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(webapi, "SERVICE", service)

    with TestClient(webapi.app) as c:
        assert c.get("/health").status_code == 200
    assert webapi.SERVICE is service
    assert (tmp_path / "data" / "projects").is_dir()


def test_build_service(monkeypatch, tmp_path):
    monkeypatch.setattr(webapi, "DATA_DIR", tmp_path)
    assert isinstance(webapi.build_service(), ConversionService)
