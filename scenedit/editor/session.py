"""Interactive editing session.

EditorSession ties one open document to its undo/redo history and keeps the
per-session interaction state (selection and copy clipboard). All tree
changes go through History.apply, so every successful edit is undoable and
rejected edits leave history untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.config import EditorConfig
from ..core.history import History
from ..scene.document import DocumentStore, SceneDocument
from ..scene.naming import duplicate_as_sibling
from ..scene.node import ROOT_ID, Node, Primitive
from ..scene.spatial import reparent_keep_world
from ..scene.transform import PartialVec3
from ..scene.tree import (
    add_child,
    create_node,
    find_node,
    find_parent_and_index,
    remove_node,
    reorder_among_siblings,
    reparent,
    update_node,
)

logger = logging.getLogger(__name__)


class EditorSession:
    """One open document plus its history, selection and clipboard."""

    def __init__(
        self,
        document: SceneDocument,
        store: DocumentStore | None = None,
        config: EditorConfig | None = None,
    ):
        self.config = config or EditorConfig.default()
        self.store = store
        self.document_id = document.id
        self.title = document.title
        self.history = History(document.root, max_depth=self.config.history.max_depth)
        self.selected_id: str | None = None
        self.clipboard_id: str | None = None

    @property
    def root(self) -> Node | None:
        return self.history.present

    def node(self, node_id: str) -> Node | None:
        return find_node(self.root, node_id)

    def open_document(self, document: SceneDocument) -> None:
        """Switch to another document, discarding history and selection."""
        self.document_id = document.id
        self.title = document.title
        self.history.replace(document.root)
        self.selected_id = None
        self.clipboard_id = None
        logger.info(f"Opened document {document.id} ({document.title})")

    def select(self, node_id: str | None) -> bool:
        """Select a node (or clear the selection with None)."""
        if node_id is not None and self.node(node_id) is None:
            return False
        self.selected_id = node_id
        return True

    def add_node(
        self,
        parent_id: str,
        name: str | None = None,
        primitive: Primitive | None = None,
        position: PartialVec3 | None = None,
    ) -> Node | None:
        """Create a node under parent_id and select it.

        Returns:
            The new node, or None if the parent does not exist
        """
        node = create_node(
            name or self.config.defaults.new_node_name,
            transform={"position": position} if position else None,
            render={"primitive": primitive} if primitive else None,
        )
        if not self.history.apply(lambda root: add_child(root, parent_id, node)):
            return None
        self.selected_id = node.id
        return node

    def delete_node(self, node_id: str) -> bool:
        """Delete a node and its subtree."""
        changed = self.history.apply(lambda root: remove_node(root, node_id).new_root)
        if changed and self.selected_id is not None and self.node(self.selected_id) is None:
            self.selected_id = None
        return changed

    def rename(self, node_id: str, name: str) -> bool:
        return self.history.apply(lambda root: update_node(root, node_id, {"name": name}))

    def set_transform(
        self,
        node_id: str,
        position: PartialVec3 | None = None,
        rotation: PartialVec3 | None = None,
        scale: PartialVec3 | None = None,
    ) -> bool:
        """Patch any of the node's transform vectors (rotation in radians)."""
        patch = {"transform": {"position": position, "rotation": rotation, "scale": scale}}
        return self.history.apply(lambda root: update_node(root, node_id, patch))

    def set_primitive(self, node_id: str, primitive: Primitive) -> bool:
        patch = {"render": {"primitive": primitive}}
        return self.history.apply(lambda root: update_node(root, node_id, patch))

    def move(self, child_id: str, parent_id: str, keep_world: bool = False) -> bool:
        """Reparent a node, optionally keeping its world placement."""
        edit = reparent_keep_world if keep_world else reparent
        changed = self.history.apply(lambda root: edit(root, child_id, parent_id))
        if changed:
            self.selected_id = child_id
        return changed

    def reorder(self, child_id: str, target_index: int) -> bool:
        """Move a node to target_index among its current siblings."""
        location = find_parent_and_index(self.root, child_id)
        if location is None or location.parent_id is None:
            return False
        parent_id = location.parent_id
        changed = self.history.apply(
            lambda root: reorder_among_siblings(root, child_id, parent_id, target_index)
        )
        if changed:
            self.selected_id = child_id
        return changed

    def copy(self, node_id: str | None = None) -> bool:
        """Put a node (default: the selection) on the clipboard. The root cannot be copied."""
        node_id = node_id or self.selected_id
        if node_id is None or node_id == ROOT_ID or self.node(node_id) is None:
            return False
        self.clipboard_id = node_id
        return True

    def paste(self, anchor_id: str | None = None) -> Node | None:
        """Paste a renamed copy of the clipboard right after the anchor.

        Returns:
            The pasted node, or None if nothing was pasted
        """
        anchor_id = anchor_id or self.selected_id
        if self.clipboard_id is None or anchor_id is None:
            return None
        if self.node(self.clipboard_id) is None:
            logger.debug("Clipboard node no longer exists")
            self.clipboard_id = None
            return None

        source_id = self.clipboard_id
        pasted: list[Node] = []

        def edit(root: Node | None) -> Node | None:
            new_root, clone = duplicate_as_sibling(root, source_id, anchor_id)
            if clone is not None:
                pasted.append(clone)
            return new_root

        if not self.history.apply(edit):
            return None
        self.selected_id = pasted[0].id
        return pasted[0]

    def undo(self) -> bool:
        changed = self.history.undo()
        self._drop_stale_selection()
        return changed

    def redo(self) -> bool:
        changed = self.history.redo()
        self._drop_stale_selection()
        return changed

    def _drop_stale_selection(self) -> None:
        if self.selected_id is not None and self.node(self.selected_id) is None:
            self.selected_id = None

    def to_document(self) -> SceneDocument | None:
        """Snapshot the present tree as a document (None if the tree is empty)."""
        if self.root is None:
            return None
        return SceneDocument(id=self.document_id, title=self.title, root=self.root)

    def save(self) -> Path | None:
        """Write the present tree to the store.

        Returns:
            Path written, or None when there is no store or the tree is empty
        """
        if self.store is None:
            logger.warning("No document store configured; not saving")
            return None
        document = self.to_document()
        if document is None:
            logger.warning("Scene is empty; not saving")
            return None
        return self.store.save(document)
