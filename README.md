# clouddrive

The backend of a small personal cloud drive. It keeps a tree of folders and
the files stored in them. It writes uploaded file contents to disk under an
upload directory, and records their metadata in an SQLite database.

## Application state

`clouddrive.state.AppState(upload_dir, database=":memory:")` holds what every
operation needs. `upload_dir` is the directory where uploaded contents are
written. `database` is an SQLite path, and defaults to an in-memory database.
`AppState.connect()` opens the connection on first use, creates the `folders`
and `files` tables if they are missing, and returns the same connection after
that.

Every operation acts for one fixed user id (`PLACEHOLDER_USER_ID`). The root
folder is identified by the nil UUID (`ROOT_FOLDER_ID`).

## Folders

`clouddrive.folders` works with request and response dataclasses:

- `create_folder(state, CreateFolderRequest(name, parent_id=None))` returns a
  `FolderResponse` with a fresh UUID.
- `rename_folder(state, RenameFolderRequest(folder_id, new_name))` returns a
  `RenameFolderResponse`.
- `move_folder(state, MoveFolderRequest(folder_id, new_parent_id))` returns a
  `MoveFolderResponse`. It raises `LookupError` if the folder does not exist.
- `delete_folder(state, DeleteFolderRequest(folder_id))` returns a
  `DeleteFolderResponse`. It deletes the folder, every folder below it, and
  the files recorded in all of them, in one transaction.

Creating, renaming or moving a folder so that two folders with the same name
would share a parent raises `FolderConflictError`.

## Listing

`clouddrive.files.list_entries(state, request)` takes a `FileRequest`.
`FileRequest.from_json(payload)` builds one from a decoded JSON object with an
optional `"folder_id"` string. The result is a dictionary with two lists:

- `"files"`: one `[id, filename, size, last_modified]` per file.
- `"folders"`: one `[id, name, parent_id]` per folder.

A request without a folder id lists the files of the root folder. Folders are
matched with `parent_id = ?`, so a request without a folder id returns no
folders.

## Uploads

`clouddrive.upload.save_uploads(state, uploads)` takes an iterable of
`(filename, data)` pairs and skips pairs whose filename is `None`.

For each remaining file, it first cleans the name with `sanitize_filename`.
That function removes characters unsafe in file names and control characters,
turns names made only of dots into an empty name, and caps the name at
255 bytes. The contents are then written to `<upload_dir>/<user id>/<new file
id>`. The file is recorded in the root folder. The result is a list of
`UploadResponse` values.

Before storing a file, `save_uploads` raises `FileConflictError` if a file of
the same name is recorded with no folder (`folder_id` NULL). Uploaded files
are recorded under the nil root id, so two uploads of the same name do not
trigger this check. If nothing was stored, it raises `NoFilesUploadedError`.

## Shared types

`clouddrive.entry.Entry` describes one item of a listing: name, path, size,
whether it is a directory, and last modified time. `Entry.to_dict()` returns
it as a plain dictionary.

## Serving over HTTP

`clouddrive.routes.router(state)` builds a Flask application bound to an
`AppState`:

```python
from clouddrive.routes import router
from clouddrive.state import AppState

app = router(AppState("uploads", "drive.db"))
app.run(port=8000)
```

All routes accept `POST`:

| Route | Body | Success |
|---|---|---|
| `/api/v1/files` | `{"folder_id": ...}` (optional) | 200, the listing |
| `/api/v1/upload` | multipart form with files | 200, `{"status": "success"}` |
| `/api/v1/folder/create` | `{"name", "parent_id"?}` | 201 |
| `/api/v1/folder/rename` | `{"folder_id", "new_name"}` | 200 |
| `/api/v1/folder/move` | `{"folder_id", "new_parent_id"}` | 200 |
| `/api/v1/folder/delete` | `{"folder_id"}` | 200 |

The routes report errors with these status codes:

- A folder name clash answers 409.
- An upload name clash answers 409 with `{"status": "failed", "message": ...}`.
- An upload without files answers 400 with `{"status": "failed"}`.
- Moving an unknown folder answers 404.
- A malformed body answers 422.

## What it does not do

- There is no download route, and no way to delete a single file.
- There are no user accounts or authentication: every request acts as the one
  fixed user.
- Uploads always go to the root folder.
- There is no command-line entry point. Serve the application returned by
  `router` yourself.
- There is no client or web interface.

## Tests

The test suite uses pytest, available through the `test` extra.