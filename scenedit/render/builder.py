"""Build renderable trimesh scenes from a node tree.

The trimesh scene graph mirrors the node tree: every node becomes a frame
named by its node id, with its local transform on the edge from its parent.
Nodes with a render marker also carry a unit primitive mesh whose geometry
name is the node id, so hits and selections map straight back to nodes.
The tree is only read, never modified.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import trimesh

from ..core.config import RenderParams
from ..scene.node import Node

logger = logging.getLogger(__name__)

# trimesh builds round primitives along +Z; the editor's are along +Y
_Z_TO_Y = trimesh.transformations.rotation_matrix(-np.pi / 2, [1, 0, 0])


def make_primitive(primitive: str, params: RenderParams | None = None) -> trimesh.Trimesh:
    """Create a unit primitive mesh centered at the origin.

    Args:
        primitive: One of box, cylinder, cone, sphere
        params: Tessellation settings

    Returns:
        Mesh fitting the unit cube, Y-up

    Raises:
        ValueError: If the primitive is unknown
    """
    params = params or RenderParams()

    if primitive == "box":
        return trimesh.creation.box(extents=[1.0, 1.0, 1.0])
    if primitive == "sphere":
        return trimesh.creation.icosphere(
            subdivisions=params.sphere_subdivisions, radius=0.5
        )
    if primitive == "cylinder":
        mesh = trimesh.creation.cylinder(
            radius=0.5, height=1.0, sections=params.radial_sections
        )
        mesh.apply_transform(_Z_TO_Y)
        return mesh
    if primitive == "cone":
        mesh = trimesh.creation.cone(
            radius=0.5, height=1.0, sections=params.radial_sections
        )
        # Base sits at z=0; center it like the other primitives
        mesh.apply_translation([0.0, 0.0, -0.5])
        mesh.apply_transform(_Z_TO_Y)
        return mesh

    raise ValueError(f"Unknown primitive: {primitive}")


def build_scene(root: Node | None, params: RenderParams | None = None) -> trimesh.Scene:
    """Convert a node tree into a hierarchical trimesh scene.

    Args:
        root: Root of the tree (None gives an empty scene)
        params: Tessellation settings

    Returns:
        trimesh.Scene with one frame per node, named by node id
    """
    scene = trimesh.Scene()
    if root is None:
        return scene

    def add(node: Node, parent: str) -> None:
        matrix = node.transform.to_matrix()
        if node.render is not None:
            mesh = make_primitive(node.render.primitive, params)
            mesh.metadata["node_id"] = node.id
            mesh.metadata["name"] = node.name
            scene.add_geometry(
                mesh,
                node_name=node.id,
                geom_name=node.id,
                parent_node_name=parent,
                transform=matrix,
            )
        else:
            scene.graph.update(frame_from=parent, frame_to=node.id, matrix=matrix)

        for child in node.children:
            add(child, node.id)

    add(root, scene.graph.base_frame)
    logger.debug(f"Built scene with {len(scene.geometry)} meshes")
    return scene


def export_scene(
    root: Node | None,
    path: str | Path,
    params: RenderParams | None = None,
) -> Path:
    """Export the tree to any format trimesh can write (.glb, .gltf, .obj, ...).

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    scene = build_scene(root, params)
    scene.export(file_obj=str(path))
    logger.info(f"Exported {len(scene.geometry)} meshes to {path}")
    return path
