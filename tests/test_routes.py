import io
import uuid

import pytest

from clouddrive.routes import router
from clouddrive.state import AppState


@pytest.fixture
def state(tmp_path):
    return AppState(upload_dir=tmp_path)


@pytest.fixture
def client(state):
    return router(state).test_client()


def _create(client, name, parent_id=None):
    return client.post("/api/v1/folder/create", json={"name": name, "parent_id": parent_id})


def test_create_folder_and_conflict(client):
    first = _create(client, "docs")
    assert first.status_code == 201
    body = first.get_json()
    assert body["name"] == "docs"
    assert body["parent_id"] is None
    uuid.UUID(body["id"])
    second = _create(client, "docs")
    assert second.status_code == 409
    assert second.get_data(as_text=True) == "Folder already exists with that name"


def test_upload_then_list(client):
    response = client.post(
        "/api/v1/upload",
        data={"file": (io.BytesIO(b"hi there"), "hi.txt")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    assert response.get_json() == {"status": "success"}
    listing = client.post("/api/v1/files", json={}).get_json()
    assert [(f[1], f[2]) for f in listing["files"]] == [("hi.txt", len(b"hi there"))]


def test_upload_without_files_is_bad_request(client):
    response = client.post(
        "/api/v1/upload", data={"note": "text"}, content_type="multipart/form-data"
    )
    assert response.status_code == 400
    assert response.get_json() == {"status": "failed"}


def test_invalid_payload_is_rejected(client):
    assert client.post("/api/v1/folder/create", json={}).status_code == 422
    bad_uuid = client.post("/api/v1/files", json={"folder_id": "nope"})
    assert bad_uuid.status_code == 422


def test_move_missing_folder_is_not_found(client):
    response = client.post(
        "/api/v1/folder/move",
        json={"folder_id": str(uuid.uuid4()), "new_parent_id": str(uuid.uuid4())},
    )
    assert response.status_code == 404


def test_rename_move_delete(client):
    parent_id = _create(client, "parent").get_json()["id"]
    folder_id = _create(client, "child").get_json()["id"]

    renamed = client.post(
        "/api/v1/folder/rename", json={"folder_id": folder_id, "new_name": "renamed"}
    )
    assert renamed.get_json() == {"id": folder_id, "name": "renamed"}

    moved = client.post(
        "/api/v1/folder/move", json={"folder_id": folder_id, "new_parent_id": parent_id}
    )
    assert moved.get_json() == {"id": folder_id, "new_parent_id": parent_id}

    listing = client.post("/api/v1/files", json={"folder_id": parent_id}).get_json()
    assert listing["folders"] == [[folder_id, "renamed", parent_id]]

    deleted = client.post("/api/v1/folder/delete", json={"folder_id": parent_id})
    assert deleted.get_json() == {"id": parent_id}
    after = client.post("/api/v1/files", json={"folder_id": parent_id}).get_json()
    assert after["folders"] == []