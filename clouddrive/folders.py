"""Creating, renaming, moving and deleting folders."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from uuid import UUID

from clouddrive.state import PLACEHOLDER_USER_ID, AppState

CONFLICT_MESSAGE = "Folder already exists with that name"


class FolderConflictError(Exception):
    """A folder with the same name already exists in the target parent."""

    def __init__(self, message: str = CONFLICT_MESSAGE) -> None:
        super().__init__(message)


@dataclass(frozen=True)
class CreateFolderRequest:
    name: str
    parent_id: UUID | None = None


@dataclass(frozen=True)
class FolderResponse:
    id: UUID
    name: str
    parent_id: UUID | None


@dataclass(frozen=True)
class RenameFolderRequest:
    folder_id: UUID
    new_name: str


@dataclass(frozen=True)
class RenameFolderResponse:
    id: UUID
    name: str


@dataclass(frozen=True)
class MoveFolderRequest:
    folder_id: UUID
    new_parent_id: UUID


@dataclass(frozen=True)
class MoveFolderResponse:
    id: UUID
    new_parent_id: UUID | None


@dataclass(frozen=True)
class DeleteFolderRequest:
    folder_id: UUID


@dataclass(frozen=True)
class DeleteFolderResponse:
    id: UUID


def _sql_id(value: UUID | None) -> str | None:
    return None if value is None else str(value)


def create_folder(state: AppState, request: CreateFolderRequest) -> FolderResponse:
    """Create a folder, refusing a duplicate name under the same parent."""
    db = state.connect()
    user_id = str(PLACEHOLDER_USER_ID)
    existing = db.execute(
        "SELECT id FROM folders WHERE user_id = ? AND parent_id IS ? AND name = ?",
        (user_id, _sql_id(request.parent_id), request.name),
    ).fetchone()
    if existing is not None:
        raise FolderConflictError()

    folder_id = uuid.uuid4()
    db.execute(
        "INSERT INTO folders (id, user_id, name, parent_id) VALUES (?, ?, ?, ?)",
        (str(folder_id), user_id, request.name, _sql_id(request.parent_id)),
    )
    return FolderResponse(id=folder_id, name=request.name, parent_id=request.parent_id)


def rename_folder(state: AppState, request: RenameFolderRequest) -> RenameFolderResponse:
    """Rename a folder, refusing a name already used by a sibling."""
    db = state.connect()
    user_id = str(PLACEHOLDER_USER_ID)
    existing = db.execute(
        "SELECT id FROM folders WHERE user_id = ? "
        "AND parent_id IS (SELECT parent_id FROM folders WHERE id = ?) AND name = ?",
        (user_id, str(request.folder_id), request.new_name),
    ).fetchone()
    if existing is not None:
        raise FolderConflictError()

    db.execute(
        "UPDATE folders SET name = ? WHERE id = ? AND user_id = ?",
        (request.new_name, str(request.folder_id), user_id),
    )
    return RenameFolderResponse(id=request.folder_id, name=request.new_name)


def move_folder(state: AppState, request: MoveFolderRequest) -> MoveFolderResponse:
    """Move a folder under a new parent, refusing a clash with an existing name there."""
    db = state.connect()
    user_id = str(PLACEHOLDER_USER_ID)
    row = db.execute(
        "SELECT name FROM folders WHERE id = ? AND user_id = ?",
        (str(request.folder_id), user_id),
    ).fetchone()
    if row is None:
        raise LookupError(f"folder {request.folder_id} not found")

    existing = db.execute(
        "SELECT id FROM folders WHERE user_id = ? AND parent_id IS ? AND name = ?",
        (user_id, str(request.new_parent_id), row["name"]),
    ).fetchone()
    if existing is not None:
        raise FolderConflictError()

    db.execute(
        "UPDATE folders SET parent_id = ? WHERE id = ? AND user_id = ?",
        (str(request.new_parent_id), str(request.folder_id), user_id),
    )
    return MoveFolderResponse(id=request.folder_id, new_parent_id=request.new_parent_id)


_SUBFOLDERS_QUERY = """
WITH RECURSIVE subfolders(id) AS (
    SELECT id FROM folders WHERE id = ? AND user_id = ?
    UNION
    SELECT f.id FROM folders f
    JOIN subfolders sf ON f.parent_id = sf.id
)
SELECT id FROM subfolders
"""


def delete_folder(state: AppState, request: DeleteFolderRequest) -> DeleteFolderResponse:
    """Delete a folder with all its subfolders and the files inside them, atomically."""
    db = state.connect()
    user_id = str(PLACEHOLDER_USER_ID)
    db.execute("BEGIN")
    try:
        folder_ids = [
            row["id"]
            for row in db.execute(_SUBFOLDERS_QUERY, (str(request.folder_id), user_id))
        ]
        for folder_id in folder_ids:
            db.execute(
                "DELETE FROM folders WHERE id = ? AND user_id = ?", (folder_id, user_id)
            )
            db.execute(
                "DELETE FROM files WHERE folder_id = ? AND user_id = ?", (folder_id, user_id)
            )
    except BaseException:
        db.execute("ROLLBACK")
        raise
    db.execute("COMMIT")
    return DeleteFolderResponse(id=request.folder_id)