"""Sibling name resolution for duplicated subtrees.

Pasting a copy next to the original should not produce two siblings with
the same visible name. Copies are numbered "Name (1)", "Name (2)", ...
after the highest number already present among the destination siblings.
"""

from __future__ import annotations

import re
from typing import Iterable

from .node import Node
from .tree import (
    add_child,
    clone_node,
    find_node,
    find_parent_and_index,
    reorder_among_siblings,
)

_SUFFIX_RE = re.compile(r"\s+\(\d+\)$")
_NUMBERED_RE = re.compile(r"^(.+)\s+\((\d+)\)$")


def base_name(name: str) -> str:
    """Strip a trailing " (n)" copy suffix."""
    return _SUFFIX_RE.sub("", name)


def resolve_copy_name(name: str, siblings: Iterable[Node | str]) -> str:
    """Pick a name for a copy of `name` that does not collide with siblings.

    A sibling named exactly like the base counts as number 0.

    Args:
        name: Name of the node being copied
        siblings: Existing children (or their names) of the destination parent

    Returns:
        The base name if nothing collides, otherwise "base (max + 1)"
    """
    base = base_name(name)
    found_any = False
    max_num = 0

    for sibling in siblings:
        sibling_name = sibling.name if isinstance(sibling, Node) else sibling
        if sibling_name == base:
            found_any = True
            continue
        m = _NUMBERED_RE.match(sibling_name)
        if m and m.group(1) == base:
            found_any = True
            max_num = max(max_num, int(m.group(2)))

    return f"{base} ({max_num + 1})" if found_any else base


def insert_after(root: Node | None, node: Node, anchor_id: str) -> Node | None:
    """Insert node as the sibling directly following anchor_id.

    Returns:
        New root, or the original root if the anchor is missing or is
        the root (the root has no siblings)
    """
    location = find_parent_and_index(root, anchor_id)
    if location is None or location.parent_id is None:
        return root

    added = add_child(root, location.parent_id, node)
    return reorder_among_siblings(
        added, node.id, location.parent_id, location.index_in_parent + 1
    )


def duplicate_as_sibling(
    root: Node | None,
    source_id: str,
    anchor_id: str,
) -> tuple[Node | None, Node | None]:
    """Paste a renamed deep copy of source_id right after anchor_id.

    Returns:
        Tuple of (new root, inserted clone). The clone is None and the
        root unchanged when the source or anchor is missing or the anchor
        is the root.
    """
    source = find_node(root, source_id)
    location = find_parent_and_index(root, anchor_id)
    if source is None or location is None or location.parent_id is None:
        return root, None

    parent = find_node(root, location.parent_id)
    clone = clone_node(source)
    clone = clone.model_copy(
        update={"name": resolve_copy_name(source.name, parent.children)}
    )
    return insert_after(root, clone, anchor_id), clone
