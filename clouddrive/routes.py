"""HTTP routes of the drive server."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any
from uuid import UUID

from flask import Flask, jsonify, request

from clouddrive.files import FileRequest, list_entries
from clouddrive.folders import (
    CreateFolderRequest,
    DeleteFolderRequest,
    FolderConflictError,
    MoveFolderRequest,
    RenameFolderRequest,
    create_folder,
    delete_folder,
    move_folder,
    rename_folder,
)
from clouddrive.state import AppState
from clouddrive.upload import FileConflictError, NoFilesUploadedError, save_uploads


class _InvalidPayload(Exception):
    pass


def _payload() -> dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        raise _InvalidPayload("expected a JSON object")
    return payload


def _text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        raise _InvalidPayload(f"missing field `{key}`")
    if not isinstance(value, str):
        raise _InvalidPayload(f"field `{key}` must be a string")
    return value


def _uuid(payload: dict[str, Any], key: str) -> UUID:
    value = _text(payload, key)
    try:
        return UUID(value)
    except ValueError as exc:
        raise _InvalidPayload(f"field `{key}` is not a valid UUID") from exc


def _optional_uuid(payload: dict[str, Any], key: str) -> UUID | None:
    return None if payload.get(key) is None else _uuid(payload, key)


def _jsonable(response: Any) -> dict[str, Any]:
    return {
        key: str(value) if isinstance(value, UUID) else value
        for key, value in asdict(response).items()
    }


def router(state: AppState) -> Flask:
    """Build the web application serving the drive API."""
    app = Flask(__name__)

    @app.errorhandler(_InvalidPayload)
    def _invalid(error: _InvalidPayload):
        return str(error), 422

    @app.errorhandler(FolderConflictError)
    def _conflict(error: FolderConflictError):
        return str(error), 409

    @app.errorhandler(LookupError)
    def _missing(error: LookupError):
        return str(error), 404

    @app.post("/api/v1/files")
    def files():
        try:
            file_request = FileRequest.from_json(_payload())
        except (TypeError, ValueError) as exc:
            raise _InvalidPayload(str(exc)) from exc
        return jsonify(list_entries(state, file_request)), 200

    @app.post("/api/v1/upload")
    def upload():
        uploads = (
            (storage.filename, storage.read())
            for _, storage in request.files.items(multi=True)
        )
        try:
            save_uploads(state, uploads)
        except FileConflictError as exc:
            return jsonify(status="failed", message=str(exc)), 409
        except NoFilesUploadedError:
            return jsonify(status="failed"), 400
        return jsonify(status="success"), 200

    @app.post("/api/v1/folder/create")
    def folder_create():
        payload = _payload()
        folder_request = CreateFolderRequest(
            name=_text(payload, "name"), parent_id=_optional_uuid(payload, "parent_id")
        )
        return jsonify(_jsonable(create_folder(state, folder_request))), 201

    @app.post("/api/v1/folder/rename")
    def folder_rename():
        payload = _payload()
        folder_request = RenameFolderRequest(
            folder_id=_uuid(payload, "folder_id"), new_name=_text(payload, "new_name")
        )
        return jsonify(_jsonable(rename_folder(state, folder_request))), 200

    @app.post("/api/v1/folder/move")
    def folder_move():
        payload = _payload()
        folder_request = MoveFolderRequest(
            folder_id=_uuid(payload, "folder_id"),
            new_parent_id=_uuid(payload, "new_parent_id"),
        )
        return jsonify(_jsonable(move_folder(state, folder_request))), 200

    @app.post("/api/v1/folder/delete")
    def folder_delete():
        payload = _payload()
        folder_request = DeleteFolderRequest(folder_id=_uuid(payload, "folder_id"))
        return jsonify(_jsonable(delete_folder(state, folder_request))), 200

    return app