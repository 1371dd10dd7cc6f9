"""scenedit - hierarchical 3D scene editor.

A tree of named nodes with position/rotation/scale transforms and optional
primitive meshes, edited through pure copy-on-write tree operations with a
bounded undo/redo history on top.
"""

__version__ = "0.1.0"

from .core.config import EditorConfig
from .core.history import MAX_HISTORY, History
from .editor.session import EditorSession
from .scene.document import DocumentStore, SceneDocument
from .scene.node import ROOT_ID, Node, NodePatch, RenderSpec
from .scene.transform import Transform
from .scene.tree import (
    add_child,
    clone_node,
    create_node,
    find_node,
    find_parent_and_index,
    remove_node,
    reorder_among_siblings,
    reparent,
    update_node,
)

__all__ = [
    "EditorConfig",
    "History",
    "MAX_HISTORY",
    "EditorSession",
    "DocumentStore",
    "SceneDocument",
    "ROOT_ID",
    "Node",
    "NodePatch",
    "RenderSpec",
    "Transform",
    "add_child",
    "clone_node",
    "create_node",
    "find_node",
    "find_parent_and_index",
    "remove_node",
    "reorder_among_siblings",
    "reparent",
    "update_node",
]
