"""Scene node data structures.

A scene is a tree of immutable Node values. Every edit produces a new Node
that replaces the old one in a new tree, so a Node value belongs to exactly
the tree snapshots that contain it and is never changed in place.
"""

from __future__ import annotations

import uuid
from typing import Literal, get_args

from pydantic import BaseModel, Field

from .transform import Transform, TransformPatch

ROOT_ID = "root"

Primitive = Literal["box", "cylinder", "cone", "sphere"]
PRIMITIVES: tuple[str, ...] = get_args(Primitive)


def new_node_id() -> str:
    """Generate a fresh globally unique node id."""
    return str(uuid.uuid4())


class RenderSpec(BaseModel):
    """Render marker. Presence means "draw this primitive here"."""

    primitive: Primitive = Field(description="Unit primitive to draw")

    model_config = {"frozen": True}


class Node(BaseModel):
    """A named entry in the scene tree.

    Nodes without a render marker are empty groups used for organizing
    the hierarchy. Children order is significant.
    """

    id: str = Field(description="Unique identifier within the tree")
    name: str = Field(default="", description="Display name")
    transform: Transform = Field(
        default_factory=Transform,
        description="Position, rotation, and scale relative to the parent"
    )
    children: tuple[Node, ...] = Field(
        default=(),
        description="Ordered child nodes"
    )
    render: RenderSpec | None = Field(
        default=None,
        description="Render marker; None for empty groups"
    )

    model_config = {"frozen": True}

    @property
    def is_root(self) -> bool:
        return self.id == ROOT_ID

    def __repr__(self) -> str:
        prim = f", {self.render.primitive}" if self.render else ""
        return f"Node({self.name!r}, id={self.id!r}{prim}, children={len(self.children)})"


Node.model_rebuild()


class RenderPatch(BaseModel):
    """Partial render marker, shallow-merged onto the existing one."""

    primitive: Primitive | None = None


class NodePatch(BaseModel):
    """Fields that may be changed on an existing node.

    id and children are deliberately absent: unknown keys are ignored, so a
    patch can never rename or restructure a node.
    """

    name: str | None = None
    transform: TransformPatch | None = None
    render: RenderPatch | None = None

    model_config = {"extra": "ignore"}

    def apply_to(self, node: Node) -> Node:
        """Return a copy of node with this patch applied."""
        update: dict = {}
        if self.name is not None:
            update["name"] = self.name
        if self.transform is not None:
            update["transform"] = node.transform.merged(self.transform)
        if self.render is not None:
            fields = self.render.model_dump(exclude_none=True)
            if node.render is not None:
                update["render"] = node.render.model_copy(update=fields)
            elif fields:
                update["render"] = RenderSpec(**fields)
        return node.model_copy(update=update)
