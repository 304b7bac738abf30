"""A small personal cloud drive backend: folders, file listings and uploads stored with SQLite."""

__version__ = "0.1.0"

__all__ = ["entry", "files", "folders", "routes", "state", "upload"]