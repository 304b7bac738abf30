"""A directory listing entry shared between server and client."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Entry:
    """A file or directory as shown in a listing."""

    name: str
    path: str
    size: int
    is_dir: bool
    last_modified: str

    def to_dict(self) -> dict[str, Any]:
        """Return the entry as a JSON-ready mapping."""
        return asdict(self)