"""Tests for SceneDocument serialization and DocumentStore."""

import json

import pytest
from pydantic import ValidationError

from scenedit.core.config import EditorConfig
from scenedit.scene.document import DocumentStore, SceneDocument
from scenedit.scene.node import ROOT_ID
from scenedit.scene.tree import add_child, create_node, find_node


@pytest.fixture
def document() -> SceneDocument:
    root = create_node("Scene", is_root=True)
    group = create_node("Group", transform={"rotation": (0.1, 0.2, 0.3)})
    cube = create_node("Cube", transform={"position": (1.5, 2, -3), "scale": (1, 2, 3)},
                       render={"primitive": "box"})
    root = add_child(root, ROOT_ID, group)
    root = add_child(root, group.id, cube)
    root = add_child(root, ROOT_ID, create_node("Sphere", render={"primitive": "sphere"}))
    return SceneDocument(id="doc1", title="Test", root=root)


class TestSceneDocument:
    """Test the persisted document shape."""

    def test_round_trip(self, document):
        loaded = SceneDocument.from_json(document.to_json())
        assert loaded.model_dump() == document.model_dump()

    def test_plain_data(self, document):
        data = json.loads(document.to_json())
        assert set(data) == {"id", "title", "root"}
        assert data["root"]["id"] == ROOT_ID
        group = data["root"]["children"][0]
        assert "render" not in group
        assert group["children"][0]["render"] == {"primitive": "box"}
        assert group["children"][0]["transform"]["scale"] == [1.0, 2.0, 3.0]

    def test_new(self):
        doc = SceneDocument.new(title="Fresh", root_name="Root")
        assert doc.title == "Fresh"
        assert doc.root.id == ROOT_ID
        assert doc.root.name == "Root"

    def test_rejects_bad_root_id(self):
        with pytest.raises(ValidationError):
            SceneDocument(id="x", title="x", root=create_node("not root"))

    def test_rejects_duplicate_ids(self, document):
        data = document.to_data()
        data["root"]["children"].append(data["root"]["children"][0])
        with pytest.raises(ValidationError):
            SceneDocument.model_validate(data)


class TestDocumentStore:
    """Test saving and loading documents from disk."""

    def test_save_and_load(self, tmp_path, document):
        store = DocumentStore(tmp_path)
        path = store.save(document)
        assert path == tmp_path / "scene_doc1.json"
        assert not path.with_suffix(".tmp").exists()

        loaded = store.load("doc1")
        assert loaded.model_dump() == document.model_dump()
        assert find_node(loaded.root, document.root.children[0].children[0].id).name == "Cube"

    def test_load_by_path(self, tmp_path, document):
        store = DocumentStore(tmp_path)
        path = store.save(document)
        assert store.load(path).id == "doc1"
        assert store.load(str(path)).id == "doc1"

    def test_load_prefers_stored_id_over_cwd_file(self, tmp_path, monkeypatch, document):
        """Test that an id is resolved in the store even if a cwd file shares its name."""
        store = DocumentStore(tmp_path / "store")
        store.save(document)

        workdir = tmp_path / "work"
        workdir.mkdir()
        other = SceneDocument.new(title="Other")
        (workdir / "doc1").write_text(other.to_json())
        monkeypatch.chdir(workdir)

        loaded = store.load("doc1")
        assert loaded.title == "Test"
        assert loaded.model_dump() == document.model_dump()

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DocumentStore(tmp_path).load("missing")

    def test_load_invalid(self, tmp_path):
        store = DocumentStore(tmp_path)
        store.document_path("bad").write_text('{"id": "bad", "title": "x"}')
        with pytest.raises(ValidationError):
            store.load("bad")

    def test_create_and_list(self, tmp_path):
        store = DocumentStore(tmp_path)
        a = store.create("A")
        b = store.create("B")
        store.document_path("broken").write_text("not json")

        listed = {doc.id for doc in store.list_documents()}
        assert listed == {a.id, b.id}

    def test_list_missing_dir(self, tmp_path):
        assert DocumentStore(tmp_path / "nothing").list_documents() == []

    def test_delete(self, tmp_path, document):
        store = DocumentStore(tmp_path)
        store.save(document)
        assert store.delete("doc1") is True
        assert store.delete("doc1") is False


class TestEditorConfig:
    """Test configuration loading."""

    def test_defaults(self):
        cfg = EditorConfig.default()
        assert cfg.history.max_depth == 100
        assert cfg.defaults.root_name == "Sample Scene"

    def test_file_round_trip(self, tmp_path):
        cfg = EditorConfig()
        cfg.history.max_depth = 10
        path = tmp_path / "cfg" / "editor.json"
        cfg.to_file(path)
        assert EditorConfig.from_file(path).history.max_depth == 10

    def test_validation(self):
        with pytest.raises(ValidationError):
            EditorConfig.model_validate({"history": {"max_depth": 0}})
