"""Structural edits on the scene tree.

Every function here is pure: it takes a root and returns a new root (or the
same root when nothing changed) without touching its input. Edits are
copy-on-write: only the nodes on the path from the root to the edited node
are reallocated and every other subtree is shared with the previous tree.
Callers can therefore detect "did anything change" with ``is``.

Invalid requests (unknown ids, cycles, out-of-range indices) never raise.
They return the original root unchanged.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, NamedTuple

from .node import ROOT_ID, Node, NodePatch, RenderSpec, new_node_id
from .transform import Transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParentLocation:
    """Where a node sits in the tree. parent_id is None for the root."""

    parent_id: str | None
    index_in_parent: int


class Removal(NamedTuple):
    """Result of remove_node."""

    new_root: Node | None
    removed: Node | None


def create_node(
    name: str,
    transform: Transform | Mapping[str, Any] | None = None,
    render: RenderSpec | Mapping[str, Any] | None = None,
    is_root: bool = False,
) -> Node:
    """Create a new childless node.

    Args:
        name: Display name
        transform: Full or partial transform; unspecified vectors default
            to position (0,0,0), scale (1,1,1), rotation (0,0,0)
        render: Optional render marker, e.g. {"primitive": "box"}
        is_root: Use the fixed root id instead of a fresh one

    Returns:
        The created Node
    """
    if transform is None:
        t = Transform()
    elif isinstance(transform, Transform):
        t = transform
    else:
        t = Transform.model_validate(
            {k: v for k, v in transform.items() if v is not None}
        )

    if render is not None and not isinstance(render, RenderSpec):
        render = RenderSpec.model_validate(render)

    return Node(
        id=ROOT_ID if is_root else new_node_id(),
        name=name,
        transform=t,
        render=render,
    )


def find_node(root: Node | None, target_id: str) -> Node | None:
    """Find a node by id (pre-order depth-first search).

    Returns:
        The node if found, None otherwise
    """
    if root is None:
        return None
    if root.id == target_id:
        return root
    for child in root.children:
        found = find_node(child, target_id)
        if found is not None:
            return found
    return None


def find_parent_and_index(root: Node | None, target_id: str) -> ParentLocation | None:
    """Find the parent id and position among siblings of a node.

    Returns:
        ParentLocation(None, -1) for the root itself, the parent id and
        0-based sibling index for other nodes, or None if not found
    """
    if root is None:
        return None
    if root.id == target_id:
        return ParentLocation(parent_id=None, index_in_parent=-1)

    for i, child in enumerate(root.children):
        if child.id == target_id:
            return ParentLocation(parent_id=root.id, index_in_parent=i)
        found = find_parent_and_index(child, target_id)
        if found is not None:
            return found
    return None


def node_path(root: Node | None, target_id: str) -> list[Node] | None:
    """Return the nodes from root down to the target (inclusive).

    Returns:
        List starting with root and ending with the target, or None
    """
    if root is None:
        return None
    if root.id == target_id:
        return [root]
    for child in root.children:
        path = node_path(child, target_id)
        if path is not None:
            return [root, *path]
    return None


def _rewrite(node: Node, target_id: str, edit: Callable[[Node], Node]) -> Node:
    """Apply edit to the first node matching target_id and rebuild its ancestors.

    Returns node itself when the target is absent or edit made no change.
    """
    if node.id == target_id:
        return edit(node)

    for i, child in enumerate(node.children):
        updated = _rewrite(child, target_id, edit)
        if updated is not child:
            children = node.children[:i] + (updated,) + node.children[i + 1:]
            return node.model_copy(update={"children": children})
    return node


def add_child(root: Node | None, parent_id: str, node: Node | None) -> Node | None:
    """Append node as the last child of parent_id.

    Returns:
        New root, or the original root if parent_id does not exist or
        node is None
    """
    if root is None or node is None:
        return root

    def append(parent: Node) -> Node:
        return parent.model_copy(update={"children": parent.children + (node,)})

    return _rewrite(root, parent_id, append)


def remove_node(root: Node | None, target_id: str) -> Removal:
    """Remove a node together with its entire subtree.

    Removing the root empties the tree: Removal(None, root).

    Returns:
        Removal(new_root, removed). When the target is absent, new_root is
        the original root and removed is None.
    """
    if root is None:
        return Removal(None, None)
    if root.id == target_id:
        return Removal(None, root)

    for i, child in enumerate(root.children):
        updated, removed = remove_node(child, target_id)
        if removed is None:
            continue
        if updated is None:
            children = root.children[:i] + root.children[i + 1:]
        else:
            children = root.children[:i] + (updated,) + root.children[i + 1:]
        return Removal(root.model_copy(update={"children": children}), removed)

    return Removal(root, None)


def update_node(
    root: Node | None,
    target_id: str,
    patch: NodePatch | Mapping[str, Any],
) -> Node | None:
    """Patch a node's name, transform, and/or render marker.

    Transform patches merge component-wise (short vectors and unusable
    components keep the prior values) and render patches merge onto the
    existing marker. id and children cannot be changed. The patch is only
    validated once the target is known to exist.

    Returns:
        New root, or the original root if target_id does not exist
    """
    if root is None:
        return None
    if find_node(root, target_id) is None:
        return root
    if not isinstance(patch, NodePatch):
        patch = NodePatch.model_validate(patch)
    return _rewrite(root, target_id, patch.apply_to)


def reparent(root: Node | None, child_id: str, parent_id: str) -> Node | None:
    """Move a subtree to become the last child of another node.

    Moving a node under itself or under one of its own descendants is
    rejected, as is moving the root or moving onto an unknown parent.

    Returns:
        New root, or the original root when the move is rejected
    """
    if root is None:
        return None
    if child_id == parent_id:
        return root

    new_root, removed = remove_node(root, child_id)
    if new_root is None or removed is None:
        return root

    if find_node(removed, parent_id) is not None:
        logger.warning(
            f"Cannot reparent node {child_id} under its own descendant {parent_id}"
        )
        return root

    if find_node(new_root, parent_id) is None:
        return root

    return add_child(new_root, parent_id, removed)


def reorder_among_siblings(
    root: Node | None,
    child_id: str,
    parent_id: str,
    target_index: int,
) -> Node | None:
    """Move a child to a new position within the same parent.

    target_index is clamped to [0, n - 1] where n is the sibling count,
    so an oversized index means "move to the end".

    A request whose clamped index is the child's current index (e.g. -10
    for the first child, 999 for the last) leaves the order unchanged and
    returns the original root, not a rebuilt copy, so it is never
    recorded as an edit.

    Returns:
        New root, or the original root if the child is not a child of
        parent_id, is the root, or already sits at the clamped position
    """
    if root is None:
        return None
    if root.id == child_id:
        return root

    def move(parent: Node) -> Node:
        ids = [c.id for c in parent.children]
        if child_id not in ids:
            return parent
        current = ids.index(child_id)
        if current == target_index:
            return parent

        children = list(parent.children)
        moved = children.pop(current)
        index = max(0, min(target_index, len(children)))
        if index == current:
            return parent
        children.insert(index, moved)
        return parent.model_copy(update={"children": tuple(children)})

    return _rewrite(root, parent_id, move)


def clone_node(node: Node) -> Node:
    """Deep-copy a subtree, giving every node in the copy a fresh id."""
    return Node(
        id=new_node_id(),
        name=node.name,
        transform=Transform(
            position=node.transform.position,
            rotation=node.transform.rotation,
            scale=node.transform.scale,
        ),
        render=RenderSpec(primitive=node.render.primitive) if node.render else None,
        children=tuple(clone_node(child) for child in node.children),
    )


def iter_nodes(root: Node | None) -> Iterator[Node]:
    """Yield every node in pre-order."""
    if root is None:
        return
    yield root
    for child in root.children:
        yield from iter_nodes(child)


def count_nodes(root: Node | None) -> int:
    """Return the number of nodes in the tree."""
    return sum(1 for _ in iter_nodes(root))


def validate_tree(root: Node | None) -> tuple[bool, list[str]]:
    """Check the tree invariants (root id, unique ids).

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    if root is None:
        return True, []

    errors = []
    if root.id != ROOT_ID:
        errors.append(f"Root node has id {root.id!r}, expected {ROOT_ID!r}")

    counts = Counter(node.id for node in iter_nodes(root))
    for node_id, count in counts.items():
        if count > 1:
            errors.append(f"Node id {node_id!r} appears {count} times")

    return len(errors) == 0, errors


def format_tree(root: Node | None) -> str:
    """Render the tree as an indented text listing."""
    if root is None:
        return "(empty tree)"

    lines = []

    def walk(node: Node, depth: int) -> None:
        prim = f" [{node.render.primitive}]" if node.render else ""
        lines.append(f"{'  ' * depth}- {node.name}{prim}")
        for child in node.children:
            walk(child, depth + 1)

    walk(root, 0)
    return "\n".join(lines)
