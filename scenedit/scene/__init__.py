"""Scene tree model and structural edits.

This package provides the immutable node tree, the copy-on-write edit
operations on it, sibling naming for duplicates, and document persistence.
"""

from .document import DocumentStore, SceneDocument
from .node import PRIMITIVES, ROOT_ID, Node, NodePatch, RenderPatch, RenderSpec
from .transform import Transform, TransformPatch
from .tree import ParentLocation, Removal

__all__ = [
    "DocumentStore",
    "SceneDocument",
    "PRIMITIVES",
    "ROOT_ID",
    "Node",
    "NodePatch",
    "RenderPatch",
    "RenderSpec",
    "Transform",
    "TransformPatch",
    "ParentLocation",
    "Removal",
]
