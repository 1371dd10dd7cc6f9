"""Local TRS transforms for scene nodes.

Provides the Transform value carried by every node (position, Euler
rotation in radians, per-axis scale) and TransformPatch, the partial form
used when editing a node. Conversion to and from 4x4 homogeneous matrices
is used when composing world transforms.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field, field_validator
from scipy.spatial.transform import Rotation

Vec3 = tuple[float, float, float]
PartialVec3 = tuple[float | None, float | None, float | None]

# Intrinsic XYZ, matching the viewport's Euler convention
EULER_ORDER = "XYZ"


def _component(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class TransformPatch(BaseModel):
    """Partial transform used by node patches.

    Any vector left as None keeps the prior vector. Vectors may be shorter
    than three components, and individual components may be None or
    non-numeric; every missing or unusable component keeps its prior value.
    """

    position: PartialVec3 | None = None
    rotation: PartialVec3 | None = None
    scale: PartialVec3 | None = None

    @field_validator("position", "rotation", "scale", mode="before")
    @classmethod
    def _pad_components(cls, value: Any) -> PartialVec3 | None:
        if value is None:
            return None
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            return (None, None, None)
        components = [_component(v) for v in list(value)[:3]]
        components += [None] * (3 - len(components))
        return tuple(components)


def _merge_vec(prior: Vec3, patch: PartialVec3 | None) -> Vec3:
    if patch is None:
        return prior
    return tuple(
        old if new is None else float(new)
        for old, new in zip(prior, patch)
    )


class Transform(BaseModel):
    """Local transformation: position + rotation + scale.

    Attributes:
        position: XYZ translation relative to the parent node
        rotation: XYZ Euler angles in radians
        scale: XYZ scale factors
    """

    position: Vec3 = Field(default=(0.0, 0.0, 0.0), description="XYZ position")
    rotation: Vec3 = Field(
        default=(0.0, 0.0, 0.0),
        description="XYZ rotation in radians (Euler angles)"
    )
    scale: Vec3 = Field(default=(1.0, 1.0, 1.0), description="XYZ scale factors")

    model_config = {"frozen": True}

    @classmethod
    def identity(cls) -> Transform:
        """Return identity transform (no transformation)."""
        return cls()

    def merged(self, patch: TransformPatch | None) -> Transform:
        """Return a copy with the patch applied component-wise.

        Args:
            patch: Partial transform; unspecified values keep their prior value

        Returns:
            New Transform (or self when the patch is empty)
        """
        if patch is None:
            return self
        return Transform(
            position=_merge_vec(self.position, patch.position),
            rotation=_merge_vec(self.rotation, patch.rotation),
            scale=_merge_vec(self.scale, patch.scale),
        )

    def translated(self, dx: float, dy: float, dz: float) -> Transform:
        """Return a copy moved by (dx, dy, dz)."""
        x, y, z = self.position
        return self.model_copy(update={"position": (x + dx, y + dy, z + dz)})

    def scaled(self, sx: float, sy: float, sz: float) -> Transform:
        """Return a copy with each scale axis multiplied."""
        x, y, z = self.scale
        return self.model_copy(update={"scale": (x * sx, y * sy, z * sz)})

    def rotated(self, rx: float, ry: float, rz: float) -> Transform:
        """Return a copy with the Euler angles incremented (radians)."""
        x, y, z = self.rotation
        return self.model_copy(update={"rotation": (x + rx, y + ry, z + rz)})

    def to_matrix(self) -> NDArray[np.float64]:
        """Convert to 4x4 homogeneous transformation matrix.

        The transformation order is: Scale -> Rotate -> Translate
        This means the matrix is built as: T @ R @ S

        Returns:
            4x4 transformation matrix
        """
        s = np.diag([*self.scale, 1.0]).astype(np.float64)

        rot = Rotation.from_euler(EULER_ORDER, self.rotation)
        r = np.eye(4, dtype=np.float64)
        r[:3, :3] = rot.as_matrix()

        t = np.eye(4, dtype=np.float64)
        t[:3, 3] = self.position

        return t @ r @ s

    @classmethod
    def from_matrix(cls, matrix: NDArray[np.float64]) -> Transform:
        """Create a Transform from a 4x4 transformation matrix.

        Scale is recovered per axis from the column norms, so shear
        introduced by non-uniform scaling under a rotated parent is lost.

        Args:
            matrix: 4x4 homogeneous transformation matrix

        Returns:
            Transform instance

        Raises:
            ValueError: If the matrix contains a reflection or zero scaling
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {matrix.shape}")

        rot_part = matrix[:3, :3]

        if np.linalg.det(rot_part) < 0:
            raise ValueError(
                "Matrix contains a reflection (negative determinant). "
                "Transform only supports proper rotations."
            )

        scales = np.linalg.norm(rot_part, axis=0)
        if np.any(scales < 1e-10):
            raise ValueError(
                f"Matrix contains zero or near-zero scale: {scales}. "
                "Transform requires positive scaling."
            )

        rot = Rotation.from_matrix(rot_part / scales)
        rotation = tuple(rot.as_euler(EULER_ORDER).tolist())

        return cls(
            position=tuple(matrix[:3, 3].tolist()),
            rotation=rotation,
            scale=tuple(scales.tolist()),
        )

    def __repr__(self) -> str:
        return (
            f"Transform(pos={self.position}, "
            f"rot={self.rotation}, scale={self.scale})"
        )
