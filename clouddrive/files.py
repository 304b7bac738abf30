"""Listing the files and folders inside a folder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from clouddrive.state import PLACEHOLDER_USER_ID, ROOT_FOLDER_ID, AppState


@dataclass(frozen=True)
class FileRequest:
    """Which folder to list; ``None`` means the root."""

    folder_id: UUID | None = None

    @classmethod
    def from_json(cls, payload: Any) -> FileRequest:
        """Build a request from a decoded JSON body."""
        if not isinstance(payload, dict):
            raise TypeError("expected a JSON object")
        raw = payload.get("folder_id")
        if raw is None:
            return cls()
        if not isinstance(raw, str):
            raise TypeError("folder_id must be a string")
        return cls(UUID(raw))


def list_entries(state: AppState, request: FileRequest) -> dict[str, list[list[Any]]]:
    """Return the files and subfolders of a folder as JSON-ready lists."""
    db = state.connect()
    user_id = str(PLACEHOLDER_USER_ID)
    file_folder = request.folder_id if request.folder_id is not None else ROOT_FOLDER_ID
    files = db.execute(
        "SELECT id, filename, size, last_modified FROM files "
        "WHERE folder_id = ? AND user_id = ?",
        (str(file_folder), user_id),
    ).fetchall()
    parent = None if request.folder_id is None else str(request.folder_id)
    folders = db.execute(
        "SELECT id, name, parent_id FROM folders WHERE parent_id = ? AND user_id = ?",
        (parent, user_id),
    ).fetchall()
    return {
        "files": [
            [row["id"], row["filename"], row["size"], row["last_modified"]] for row in files
        ],
        "folders": [[row["id"], row["name"], row["parent_id"]] for row in folders],
    }