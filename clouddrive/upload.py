"""Storing uploaded files on disk and recording them in the database."""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from clouddrive.state import PLACEHOLDER_USER_ID, ROOT_FOLDER_ID, AppState

MAX_FILENAME_BYTES = 255
ROOT_FOLDER_PATH = "/"

_ILLEGAL = re.compile(r'[/?<>\\:*|":]')
_CONTROL = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED = re.compile(r"\.+")


class FileConflictError(Exception):
    """A file with the same name is already stored."""

    def __init__(self, message: str = "File already exists with that name") -> None:
        super().__init__(message)


class NoFilesUploadedError(Exception):
    """The upload carried no file fields."""

    def __init__(self, message: str = "No files were uploaded") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class UploadResponse:
    id: str
    original_filename: str
    folder_path: str
    size: int


def sanitize_filename(name: str) -> str:
    """Strip characters unsafe in file names and cap the length at 255 bytes."""
    cleaned = _ILLEGAL.sub("", name)
    cleaned = _CONTROL.sub("", cleaned)
    if _RESERVED.fullmatch(cleaned):
        cleaned = ""
    return cleaned.encode("utf-8")[:MAX_FILENAME_BYTES].decode("utf-8", "ignore")


def save_uploads(
    state: AppState, uploads: Iterable[tuple[str | None, bytes]]
) -> list[UploadResponse]:
    """Store each ``(filename, data)`` pair; pairs without a filename are skipped.

    Files are stored in the root folder. Raises FileConflictError on a name
    clash and NoFilesUploadedError if nothing was stored.
    """
    db = state.connect()
    user_id = str(PLACEHOLDER_USER_ID)
    saved: list[UploadResponse] = []
    for filename, data in uploads:
        if filename is None:
            continue
        original_filename = sanitize_filename(filename)
        existing = db.execute(
            "SELECT id FROM files WHERE user_id = ? AND filename = ? AND folder_id IS NULL",
            (user_id, original_filename),
        ).fetchone()
        if existing is not None:
            raise FileConflictError()

        file_id = str(uuid.uuid4())
        user_dir = state.upload_dir / user_id
        user_dir.mkdir(parents=True, exist_ok=True)
        (user_dir / file_id).write_bytes(data)

        size = len(data)
        last_modified = datetime.now(timezone.utc).replace(tzinfo=None).isoformat()
        db.execute(
            "INSERT INTO files (id, user_id, filename, folder_id, size, last_modified) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (file_id, user_id, original_filename, str(ROOT_FOLDER_ID), size, last_modified),
        )
        saved.append(
            UploadResponse(
                id=file_id,
                original_filename=original_filename,
                folder_path=ROOT_FOLDER_PATH,
                size=size,
            )
        )
    if not saved:
        raise NoFilesUploadedError()
    return saved