"""Tests for EditorSession."""

import pytest

from scenedit.core.config import EditorConfig
from scenedit.editor.session import EditorSession
from scenedit.scene.document import DocumentStore, SceneDocument
from scenedit.scene.node import ROOT_ID


@pytest.fixture
def session(tmp_path) -> EditorSession:
    store = DocumentStore(tmp_path)
    return EditorSession(SceneDocument.new(title="Session"), store=store)


class TestEditing:
    """Test edits routed through history."""

    def test_add_selects_node(self, session):
        node = session.add_node(ROOT_ID, "Cube", primitive="box", position=(1, 2, 3))
        assert session.selected_id == node.id
        assert session.node(node.id).render.primitive == "box"
        assert session.node(node.id).transform.position == (1.0, 2.0, 3.0)

    def test_add_default_name(self, session):
        assert session.add_node(ROOT_ID).name == "New Node"

    def test_add_missing_parent(self, session):
        assert session.add_node("nope", "x") is None
        assert not session.history.can_undo

    def test_delete_clears_selection(self, session):
        group = session.add_node(ROOT_ID, "Group")
        child = session.add_node(group.id, "Child")
        assert session.selected_id == child.id
        assert session.delete_node(group.id)
        assert session.selected_id is None

    def test_rename_transform_primitive(self, session):
        node = session.add_node(ROOT_ID, "Cube")
        session.rename(node.id, "Box")
        session.set_transform(node.id, scale=(2, 2, 2))
        session.set_transform(node.id, position=(None, 4, None))
        session.set_primitive(node.id, "cone")
        node = session.node(node.id)
        assert node.name == "Box"
        assert node.transform.scale == (2.0, 2.0, 2.0)
        assert node.transform.position == (0.0, 4.0, 0.0)
        assert node.render.primitive == "cone"

    def test_move_and_reorder(self, session):
        a = session.add_node(ROOT_ID, "A")
        b = session.add_node(ROOT_ID, "B")
        c = session.add_node(ROOT_ID, "C")
        assert session.reorder(c.id, 0)
        assert [n.name for n in session.root.children] == ["C", "A", "B"]
        assert session.move(b.id, a.id, keep_world=True)
        assert session.node(a.id).children[0].id == b.id
        assert not session.move(a.id, b.id)
        assert not session.reorder(ROOT_ID, 0)

    def test_undo_redo(self, session):
        node = session.add_node(ROOT_ID, "Cube")
        session.rename(node.id, "Renamed")
        assert session.undo()
        assert session.node(node.id).name == "Cube"
        assert session.undo()
        assert session.node(node.id) is None
        assert session.selected_id is None
        assert session.redo()
        assert session.node(node.id).name == "Cube"


class TestClipboard:
    """Test copy and paste."""

    def test_copy_paste(self, session):
        cube = session.add_node(ROOT_ID, "Cube", primitive="box")
        other = session.add_node(ROOT_ID, "Other")
        assert session.copy(cube.id)

        pasted = session.paste(cube.id)
        assert pasted.name == "Cube (1)"
        assert session.selected_id == pasted.id
        names = [n.name for n in session.root.children]
        assert names == ["Cube", "Cube (1)", "Other"]
        assert session.undo()
        assert [n.id for n in session.root.children] == [cube.id, other.id]

    def test_copy_root_rejected(self, session):
        assert not session.copy(ROOT_ID)

    def test_paste_without_copy(self, session):
        cube = session.add_node(ROOT_ID, "Cube")
        assert session.paste(cube.id) is None

    def test_stale_clipboard(self, session):
        cube = session.add_node(ROOT_ID, "Cube")
        other = session.add_node(ROOT_ID, "Other")
        session.copy(cube.id)
        session.delete_node(cube.id)
        assert session.paste(other.id) is None
        assert session.clipboard_id is None


class TestPersistence:
    """Test saving and reopening."""

    def test_save_and_reload(self, session):
        session.add_node(ROOT_ID, "Cube", primitive="box")
        path = session.save()
        loaded = session.store.load(path)
        assert loaded.root.model_dump() == session.root.model_dump()
        assert loaded.title == "Session"

    def test_save_empty_tree(self, session):
        session.delete_node(ROOT_ID)
        assert session.root is None
        assert session.save() is None

    def test_save_without_store(self):
        assert EditorSession(SceneDocument.new()).save() is None

    def test_open_document_resets_history(self, session):
        session.add_node(ROOT_ID, "Cube")
        other = SceneDocument.new(title="Other")
        session.open_document(other)
        assert session.root is other.root
        assert session.title == "Other"
        assert not session.history.can_undo
        assert session.selected_id is None

    def test_history_depth_from_config(self):
        cfg = EditorConfig.model_validate({"history": {"max_depth": 3}})
        session = EditorSession(SceneDocument.new(), config=cfg)
        for i in range(6):
            session.add_node(ROOT_ID, f"n{i}")
        assert len(session.history.past) == 3
