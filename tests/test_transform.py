"""Tests for Transform, matrix conversion, and world-space helpers."""

import math

import numpy as np
import pytest

from scenedit.scene.node import ROOT_ID
from scenedit.scene.spatial import reparent_keep_world, world_matrix
from scenedit.scene.transform import Transform, TransformPatch
from scenedit.scene.tree import add_child, create_node, find_node, reparent


class TestTransform:
    """Test Transform functionality."""

    def test_default_transform(self):
        """Test default transform is identity-like."""
        t = Transform()
        assert t.position == (0.0, 0.0, 0.0)
        assert t.rotation == (0.0, 0.0, 0.0)
        assert t.scale == (1.0, 1.0, 1.0)
        assert Transform.identity() == t

    def test_to_matrix_identity(self):
        np.testing.assert_array_almost_equal(Transform().to_matrix(), np.eye(4))

    def test_to_matrix_translation(self):
        matrix = Transform(position=(10.0, 20.0, 30.0)).to_matrix()
        np.testing.assert_array_almost_equal(matrix[:3, 3], [10.0, 20.0, 30.0])

    def test_to_matrix_scale(self):
        matrix = Transform(scale=(2.0, 3.0, 4.0)).to_matrix()
        np.testing.assert_array_almost_equal(np.diag(matrix), [2.0, 3.0, 4.0, 1.0])

    def test_to_matrix_rotation_z(self):
        """Test Z-rotation in radians: x -> y."""
        matrix = Transform(rotation=(0.0, 0.0, math.pi / 2)).to_matrix()
        result = matrix @ np.array([1.0, 0.0, 0.0, 1.0])
        np.testing.assert_array_almost_equal(result[:3], [0.0, 1.0, 0.0])

    def test_from_matrix_roundtrip(self):
        original = Transform(
            position=(5.0, -10.0, 15.0),
            rotation=(0.3, -0.5, 1.1),
            scale=(1.5, 2.0, 0.5),
        )
        recovered = Transform.from_matrix(original.to_matrix())
        np.testing.assert_allclose(recovered.position, original.position, atol=1e-9)
        np.testing.assert_allclose(recovered.rotation, original.rotation, atol=1e-9)
        np.testing.assert_allclose(recovered.scale, original.scale, atol=1e-9)

    def test_from_matrix_reflection(self):
        matrix = np.diag([-1.0, 1.0, 1.0, 1.0])
        with pytest.raises(ValueError, match="reflection"):
            Transform.from_matrix(matrix)

    def test_from_matrix_zero_scale(self):
        matrix = np.diag([0.0, 1.0, 1.0, 1.0])
        with pytest.raises(ValueError):
            Transform.from_matrix(matrix)

    def test_from_matrix_shape(self):
        with pytest.raises(ValueError):
            Transform.from_matrix(np.eye(3))

    def test_helpers(self):
        t = Transform().translated(1, 2, 3).scaled(2, 2, 2).rotated(0.1, 0, 0)
        assert t.position == (1.0, 2.0, 3.0)
        assert t.scale == (2.0, 2.0, 2.0)
        assert t.rotation == (0.1, 0.0, 0.0)


class TestTransformPatch:
    """Test merging partial transforms."""

    def test_empty_patch(self):
        t = Transform(position=(1.0, 2.0, 3.0))
        assert t.merged(None) is t
        assert t.merged(TransformPatch()) == t

    def test_vector_merge(self):
        t = Transform(position=(1.0, 2.0, 3.0), scale=(2.0, 2.0, 2.0))
        merged = t.merged(TransformPatch(rotation=(0.5, 0.5, 0.5)))
        assert merged.position == (1.0, 2.0, 3.0)
        assert merged.scale == (2.0, 2.0, 2.0)
        assert merged.rotation == (0.5, 0.5, 0.5)

    def test_component_merge(self):
        t = Transform(position=(1.0, 2.0, 3.0))
        merged = t.merged(TransformPatch(position=(None, None, 7.0)))
        assert merged.position == (1.0, 2.0, 7.0)

    def test_short_vectors_padded(self):
        patch = TransformPatch.model_validate({"position": [4], "scale": [2, 3]})
        assert patch.position == (4.0, None, None)
        assert patch.scale == (2.0, 3.0, None)

        t = Transform(position=(1.0, 2.0, 3.0))
        merged = t.merged(patch)
        assert merged.position == (4.0, 2.0, 3.0)
        assert merged.scale == (2.0, 3.0, 1.0)


@pytest.fixture
def offset_tree():
    """root -> parent (pos 10,0,0; scale 2) -> child (pos 1,0,0); root -> other (pos 0,5,0)."""
    parent = create_node("parent", transform={"position": (10, 0, 0), "scale": (2, 2, 2)})
    child = create_node("child", transform={"position": (1, 0, 0)})
    other = create_node("other", transform={"position": (0, 5, 0), "rotation": (0, 0, math.pi / 2)})
    root = create_node("Scene", is_root=True)
    root = add_child(root, ROOT_ID, parent)
    root = add_child(root, ROOT_ID, other)
    root = add_child(root, parent.id, child)
    return root, parent, child, other


class TestWorldSpace:
    """Test world matrices and world-preserving reparenting."""

    def test_world_matrix(self, offset_tree):
        root, _, child, _ = offset_tree
        matrix = world_matrix(root, child.id)
        # child local (1,0,0) scaled by parent 2x then offset by 10
        np.testing.assert_array_almost_equal(matrix[:3, 3], [12.0, 0.0, 0.0])

    def test_world_matrix_missing(self, offset_tree):
        assert world_matrix(offset_tree[0], "nope") is None
        assert world_matrix(None, "nope") is None

    def test_keep_world(self, offset_tree):
        root, _, child, other = offset_tree
        before = world_matrix(root, child.id)

        moved = reparent_keep_world(root, child.id, other.id)

        assert find_node(moved, other.id).children[0].id == child.id
        np.testing.assert_array_almost_equal(world_matrix(moved, child.id), before)

    def test_plain_reparent_moves_in_world(self, offset_tree):
        root, _, child, other = offset_tree
        moved = reparent(root, child.id, other.id)
        assert not np.allclose(world_matrix(moved, child.id), world_matrix(root, child.id))

    def test_rejected_moves(self, offset_tree):
        root, parent, child, _ = offset_tree
        assert reparent_keep_world(root, parent.id, child.id) is root
        assert reparent_keep_world(root, child.id, "nope") is root
