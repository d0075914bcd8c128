import pytest

from vault_assistant.domain.exceptions import NotFoundError, WriteError
from vault_assistant.infrastructure.storage.workspace_store import LocalWorkspaceStore


def test_read_write_and_list(tmp_path):
    store = LocalWorkspaceStore(root=tmp_path)
    store.write_file("notes/a.md", "alpha")
    store.write_file("notes/sub/b.md", "beta")
    store.write_file("other.md", "gamma")
    assert store.read_file("notes/a.md") == "alpha"
    assert [e.path for e in store.list_files()] == ["notes/a.md", "notes/sub/b.md", "other.md"]
    assert [e.name for e in store.list_files("notes/")] == ["a.md", "b.md"]


def test_missing_and_outside_paths(tmp_path):
    store = LocalWorkspaceStore(root=tmp_path / "vault")
    with pytest.raises(NotFoundError):
        store.read_file("nope.md")
    with pytest.raises(NotFoundError):
        store.read_file("../secret.txt")
    with pytest.raises(WriteError):
        store.write_file("../escape.md", "x")


def test_hidden_dirs_only_listed_by_prefix(tmp_path):
    store = LocalWorkspaceStore(root=tmp_path)
    store.write_file(".config/skill.md", "s")
    store.write_file("visible.md", "v")
    assert [e.path for e in store.list_files()] == ["visible.md"]
    assert [e.path for e in store.list_files(".config/")] == [".config/skill.md"]


def test_active_document(tmp_path):
    store = LocalWorkspaceStore(root=tmp_path)
    assert store.get_active_document() is None
    store.write_file("today.md", "# Today")
    store.set_active_document("today.md")
    doc = store.get_active_document()
    assert doc.name == "today.md"
    assert doc.content == "# Today"
