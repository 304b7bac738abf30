"""Shared application state: the upload directory and the metadata database."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass, field
from pathlib import Path

PLACEHOLDER_USER_ID = uuid.UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")
"""The single user every request currently acts as."""

ROOT_FOLDER_ID = uuid.UUID(int=0)
"""The nil identifier, used for files stored in the root folder."""

SCHEMA = """
CREATE TABLE IF NOT EXISTS folders (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    parent_id TEXT
);
CREATE TABLE IF NOT EXISTS files (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    filename TEXT NOT NULL,
    folder_id TEXT,
    size INTEGER NOT NULL,
    last_modified TEXT NOT NULL
);
"""


@dataclass
class AppState:
    """Where uploaded files are written and where their metadata lives."""

    upload_dir: Path
    database: str = ":memory:"
    _connection: sqlite3.Connection | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.upload_dir = Path(self.upload_dir)

    def connect(self) -> sqlite3.Connection:
        """Return the database connection, opening it and creating tables on first use."""
        if self._connection is None:
            connection = sqlite3.connect(
                self.database, check_same_thread=False, isolation_level=None
            )
            connection.row_factory = sqlite3.Row
            connection.executescript(SCHEMA)
            self._connection = connection
        return self._connection