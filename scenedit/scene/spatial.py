"""World-space helpers built on the tree algebra."""

from __future__ import annotations

import logging
from functools import reduce

import numpy as np
from numpy.typing import NDArray

from .node import Node
from .transform import Transform
from .tree import find_node, node_path, reparent, update_node

logger = logging.getLogger(__name__)


def local_matrix(node: Node) -> NDArray[np.float64]:
    """Return the node's 4x4 matrix relative to its parent."""
    return node.transform.to_matrix()


def world_matrix(root: Node | None, node_id: str) -> NDArray[np.float64] | None:
    """Compose local matrices from the root down to node_id.

    Returns:
        4x4 world matrix, or None if the node is not in the tree
    """
    path = node_path(root, node_id)
    if path is None:
        return None
    return reduce(lambda acc, node: acc @ local_matrix(node), path, np.eye(4))


def reparent_keep_world(root: Node | None, child_id: str, parent_id: str) -> Node | None:
    """Reparent a node while keeping its placement in world space.

    The child's local transform is recomputed against the new parent so
    the subtree does not visibly move.

    Returns:
        New root, or the original root whenever reparent rejects the move
        or the resulting matrix cannot be expressed as a Transform
    """
    moved = reparent(root, child_id, parent_id)
    if moved is root:
        return root

    child_world = world_matrix(root, child_id)
    parent_world = world_matrix(root, parent_id)
    try:
        local = Transform.from_matrix(np.linalg.inv(parent_world) @ child_world)
    except (ValueError, np.linalg.LinAlgError) as e:
        logger.warning(f"Cannot preserve world transform of {child_id}: {e}")
        return root

    prior = find_node(root, child_id).transform
    if np.allclose(local.to_matrix(), prior.to_matrix()):
        return moved

    return update_node(
        moved,
        child_id,
        {"transform": {
            "position": local.position,
            "rotation": local.rotation,
            "scale": local.scale,
        }},
    )
