import uuid

import pytest

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
from clouddrive.state import PLACEHOLDER_USER_ID, AppState


@pytest.fixture
def state(tmp_path):
    return AppState(upload_dir=tmp_path)


def _folder_row(state, folder_id):
    return state.connect().execute(
        "SELECT name, parent_id FROM folders WHERE id = ?", (str(folder_id),)
    ).fetchone()


def _add_file(state, name, folder_id):
    state.connect().execute(
        "INSERT INTO files (id, user_id, filename, folder_id, size, last_modified) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        (str(uuid.uuid4()), str(PLACEHOLDER_USER_ID), name, str(folder_id), 1, "t"),
    )


def test_create_folder_stores_row(state):
    parent = create_folder(state, CreateFolderRequest("docs"))
    child = create_folder(state, CreateFolderRequest("notes", parent.id))
    assert child.name == "notes"
    assert child.parent_id == parent.id
    row = _folder_row(state, child.id)
    assert (row["name"], row["parent_id"]) == ("notes", str(parent.id))


def test_create_duplicate_in_root_conflicts(state):
    create_folder(state, CreateFolderRequest("docs"))
    with pytest.raises(FolderConflictError, match="Folder already exists with that name"):
        create_folder(state, CreateFolderRequest("docs"))


def test_same_name_in_different_parents_is_allowed(state):
    a = create_folder(state, CreateFolderRequest("a"))
    b = create_folder(state, CreateFolderRequest("b"))
    first = create_folder(state, CreateFolderRequest("same", a.id))
    second = create_folder(state, CreateFolderRequest("same", b.id))
    assert first.id != second.id
    assert _folder_row(state, second.id)["parent_id"] == str(b.id)


def test_rename_folder(state):
    folder = create_folder(state, CreateFolderRequest("old"))
    response = rename_folder(state, RenameFolderRequest(folder.id, "new"))
    assert response.id == folder.id
    assert _folder_row(state, folder.id)["name"] == "new"


def test_rename_to_sibling_name_conflicts(state):
    create_folder(state, CreateFolderRequest("taken"))
    folder = create_folder(state, CreateFolderRequest("mine"))
    with pytest.raises(FolderConflictError):
        rename_folder(state, RenameFolderRequest(folder.id, "taken"))
    assert _folder_row(state, folder.id)["name"] == "mine"


def test_rename_to_name_used_elsewhere_is_allowed(state):
    parent = create_folder(state, CreateFolderRequest("parent"))
    create_folder(state, CreateFolderRequest("taken", parent.id))
    folder = create_folder(state, CreateFolderRequest("mine"))
    rename_folder(state, RenameFolderRequest(folder.id, "taken"))
    assert _folder_row(state, folder.id)["name"] == "taken"


def test_move_folder(state):
    target = create_folder(state, CreateFolderRequest("target"))
    folder = create_folder(state, CreateFolderRequest("moving"))
    response = move_folder(state, MoveFolderRequest(folder.id, target.id))
    assert response.new_parent_id == target.id
    assert _folder_row(state, folder.id)["parent_id"] == str(target.id)


def test_move_into_clashing_parent_conflicts(state):
    target = create_folder(state, CreateFolderRequest("target"))
    create_folder(state, CreateFolderRequest("dup", target.id))
    folder = create_folder(state, CreateFolderRequest("dup"))
    with pytest.raises(FolderConflictError):
        move_folder(state, MoveFolderRequest(folder.id, target.id))
    assert _folder_row(state, folder.id)["parent_id"] is None


def test_move_missing_folder_raises(state):
    with pytest.raises(LookupError):
        move_folder(state, MoveFolderRequest(uuid.uuid4(), uuid.uuid4()))


def test_delete_removes_subtree_and_its_files(state):
    root = create_folder(state, CreateFolderRequest("root"))
    child = create_folder(state, CreateFolderRequest("child", root.id))
    grandchild = create_folder(state, CreateFolderRequest("gc", child.id))
    other = create_folder(state, CreateFolderRequest("other"))
    _add_file(state, "a.txt", child.id)
    _add_file(state, "b.txt", grandchild.id)
    _add_file(state, "c.txt", other.id)

    response = delete_folder(state, DeleteFolderRequest(root.id))

    assert response.id == root.id
    db = state.connect()
    assert {r["id"] for r in db.execute("SELECT id FROM folders")} == {str(other.id)}
    assert [r["filename"] for r in db.execute("SELECT filename FROM files")] == ["c.txt"]


def test_delete_survives_cycle(state):
    a = create_folder(state, CreateFolderRequest("a"))
    b = create_folder(state, CreateFolderRequest("b", a.id))
    move_folder(state, MoveFolderRequest(a.id, b.id))
    delete_folder(state, DeleteFolderRequest(a.id))
    assert state.connect().execute("SELECT COUNT(*) FROM folders").fetchone()[0] == 0