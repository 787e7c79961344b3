from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from editsync.config import AppConfig
from editsync.infra.db import DbConfig
from editsync.infra.repo_nodes import NodeRepo
from editsync.infra.repo_persons import PersonRepo
from editsync.main import create_app

DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    app = create_app()

    # Override config for test isolation.
    app.state.cfg = AppConfig(data_dir=tmp_path, repository_url="http://repo.test")

    from editsync.infra import db as db_mod

    app.state.db = db_mod.connect(DbConfig(path=app.state.cfg.db_path))
    db_mod.migrate(app.state.db)
    return TestClient(app)


def _upload(client: TestClient, title: str = "Minutes") -> dict:
    resp = client.post(
        "/documents",
        params={"title": title},
        files={"file": ("minutes.docx", b"v1", DOCX)},
    )
    assert resp.status_code == 200
    return resp.json()


def _save(client: TestClient, node_id: str, cb_key: str, content: bytes):
    return client.post(
        f"/documents/{node_id}/callback",
        params={"cb_key": cb_key},
        headers={"X-Actor": "alice"},
        files={
            "file": ("minutes.docx", content, DOCX),
            "changes": ("changes.zip", b"diff", "application/zip"),
        },
    )


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_upload_avoids_name_collisions(client: TestClient) -> None:
    first = _upload(client)
    second = _upload(client)

    assert first["name"] == "Minutes.docx"
    assert second["name"] == "Minutes (1).docx"
    assert first["key"] == f"{first['id']}_1.0"


def test_content_download(client: TestClient) -> None:
    doc = _upload(client)
    resp = client.get(f"/documents/{doc['id']}/content")

    assert resp.status_code == 200
    assert resp.content == b"v1"


def test_edit_session_and_history(client: TestClient) -> None:
    doc = _upload(client)
    node_id = doc["id"]

    checkout = client.post(f"/documents/{node_id}/checkout").json()
    cb_key = checkout["callback_url"].split("cb_key=")[1]
    assert checkout["key"] == doc["key"]

    config = client.get(f"/documents/{node_id}/editor-config").json()
    assert config["documentType"] == "text"
    assert config["document"]["key"] == checkout["key"]
    assert config["editorConfig"]["callbackUrl"] == checkout["callback_url"]

    resp = _save(client, node_id, cb_key, b"v2")
    assert resp.status_code == 200
    assert resp.json()["version"] == "1.1"

    # Same key for the rest of the session.
    config = client.get(f"/documents/{node_id}/editor-config").json()
    assert config["document"]["key"] == checkout["key"]

    body = client.get(f"/documents/{node_id}/history").json()
    assert [h["version"] for h in body["history"]] == ["1.0", "1.1"]
    assert [d["version"] for d in body["data"]] == ["1.0", "1.1"]
    assert body["data"][1]["url"] == f"http://repo.test/documents/{node_id}/content"

    assert client.post(f"/documents/{node_id}/checkin", params={"cb_key": cb_key}).status_code == 200
    config = client.get(f"/documents/{node_id}/editor-config").json()
    assert config["document"]["key"] == f"{node_id}_1.1"
    assert "callbackUrl" not in config["editorConfig"]


def test_callback_with_wrong_hash_is_rejected(client: TestClient) -> None:
    doc = _upload(client)
    client.post(f"/documents/{doc['id']}/checkout")

    resp = _save(client, doc["id"], "not-the-hash", b"v2")

    assert resp.status_code == 403
    assert resp.json() == {"detail": "callback_unauthorized"}


def test_double_checkout_conflicts(client: TestClient) -> None:
    doc = _upload(client)
    assert client.post(f"/documents/{doc['id']}/checkout").status_code == 200
    assert client.post(f"/documents/{doc['id']}/checkout").status_code == 409


def test_inconsistent_history_is_reported_as_unavailable(client: TestClient) -> None:
    doc = _upload(client)
    nodes = NodeRepo(client.app.state.db)
    nodes.create_version(doc["id"], modifier="alice")

    resp = client.get(f"/documents/{doc['id']}/history")

    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["error"] == "history_unavailable"
    assert detail["code"] == "artifact_count_mismatch"
    assert detail["node_id"] == doc["id"]


def test_unknown_document_is_404(client: TestClient) -> None:
    assert client.get("/documents/nope/history").status_code == 404
    assert client.post("/documents/nope/checkout").status_code == 404


def test_history_response_omits_absent_fields(client: TestClient) -> None:
    doc = _upload(client)

    body = client.get(f"/documents/{doc['id']}/history").json()

    assert body["history"][0]["user"] == {}
    assert "changes" not in body["history"][0]
    assert set(body["data"][0]) == {"version", "key", "url"}


def test_uploader_is_recorded_on_the_initial_version(client: TestClient) -> None:
    PersonRepo(client.app.state.db).create("alice", "Ada", "Lovelace")
    resp = client.post(
        "/documents",
        params={"title": "Minutes"},
        headers={"X-Actor": "alice"},
        files={"file": ("minutes.docx", b"v1", DOCX)},
    )
    assert resp.status_code == 200

    body = client.get(f"/documents/{resp.json()['id']}/history").json()

    assert body["history"][0]["version"] == "1.0"
    assert body["history"][0]["user"] == {"id": "alice", "name": "AdaLovelace"}
