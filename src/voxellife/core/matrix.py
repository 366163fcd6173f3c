"""4x4 matrix utilities for projecting voxel cells.

Matrices are flat numpy ``float32`` arrays of 16 values in column-major
order: the element at row ``r`` and column ``c`` lives at index ``c * 4 + r``.
Points are column vectors, so ``multiply(a, b)`` applies ``b`` first and a
transform maps a point as ``clip = M @ (x, y, z, 1)``. This is the layout a
``uniformMatrix4fv(..., transpose=False)`` upload expects.
"""

import math
from typing import Sequence
import numpy as np

from .errors import ConfigurationError, DegenerateGeometryError

# Vectors shorter than this are treated as zero length
EPSILON = 1e-6


def _to_rows(matrix: np.ndarray) -> np.ndarray:
    """Return the (row, column) indexed 4x4 view of a flat column-major matrix."""
    arr = np.asarray(matrix, dtype=np.float32)
    if arr.shape != (16,):
        raise ValueError(f"Expected a flat matrix of 16 values, got shape {arr.shape}")
    return arr.reshape(4, 4, order="F")


def _from_rows(rows: np.ndarray) -> np.ndarray:
    return np.asarray(rows, dtype=np.float32).reshape(-1, order="F")


def _vector3(values: Sequence[float], name: str) -> np.ndarray:
    vec = np.asarray(values, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise DegenerateGeometryError(f"{name} has non-finite components: {tuple(vec)}")
    return vec


def identity() -> np.ndarray:
    """Return the 4x4 identity matrix."""
    return np.eye(4, dtype=np.float32).reshape(-1)


def perspective(fov_y: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Build a right-handed OpenGL perspective projection.

    Args:
        fov_y: Vertical field of view in radians, in (0, pi)
        aspect: Viewport width divided by height, > 0
        near: Distance to the near clip plane, > 0
        far: Distance to the far clip plane, > near

    Returns:
        Projection matrix mapping view space into clip space

    Raises:
        ConfigurationError: If any parameter is out of range or not finite
    """
    errors = []
    if not all(math.isfinite(v) for v in (fov_y, aspect, near, far)):
        errors.append("projection parameters must be finite")
    else:
        if not 0.0 < fov_y < math.pi:
            errors.append(f"field of view must be in (0, pi), got {fov_y}")
        if aspect <= 0.0:
            errors.append(f"aspect must be positive, got {aspect}")
        if near <= 0.0:
            errors.append(f"near must be positive, got {near}")
        if far <= near:
            errors.append(f"far ({far}) must be greater than near ({near})")

    if errors:
        raise ConfigurationError("Invalid perspective: " + "; ".join(errors))

    f = 1.0 / math.tan(fov_y / 2.0)
    nf = 1.0 / (near - far)

    out = np.zeros(16, dtype=np.float32)
    out[0] = f / aspect
    out[5] = f
    out[10] = (far + near) * nf
    out[11] = -1.0
    out[14] = 2.0 * far * near * nf
    return out


def look_at(eye: Sequence[float], center: Sequence[float], up: Sequence[float]) -> np.ndarray:
    """Build a view matrix looking from ``eye`` towards ``center``.

    The view basis is forward ``z = normalize(eye - center)``, right
    ``x = normalize(up x z)`` and true up ``y = z x x``. The translation
    column holds ``-eye`` expressed in that basis, so the eye lands on the
    origin of view space.

    Raises:
        DegenerateGeometryError: If eye and center coincide, if up is parallel
            to the viewing direction, or if any vector is not finite
    """
    eye_v = _vector3(eye, "eye")
    center_v = _vector3(center, "center")
    up_v = _vector3(up, "up")

    forward = eye_v - center_v
    forward_len = np.linalg.norm(forward)
    if forward_len < EPSILON:
        raise DegenerateGeometryError(f"Eye {tuple(eye_v)} coincides with target {tuple(center_v)}")
    z_axis = forward / forward_len

    right = np.cross(up_v, z_axis)
    right_len = np.linalg.norm(right)
    if right_len < EPSILON:
        raise DegenerateGeometryError(f"Up vector {tuple(up_v)} is parallel to the viewing direction")
    x_axis = right / right_len

    y_axis = np.cross(z_axis, x_axis)

    rows = np.eye(4, dtype=np.float64)
    rows[0, :3] = x_axis
    rows[1, :3] = y_axis
    rows[2, :3] = z_axis
    rows[0, 3] = -np.dot(x_axis, eye_v)
    rows[1, 3] = -np.dot(y_axis, eye_v)
    rows[2, 3] = -np.dot(z_axis, eye_v)
    return _from_rows(rows)


def multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Return the product ``a * b`` (``b`` is applied first)."""
    return _from_rows(_to_rows(a) @ _to_rows(b))


def translate(matrix: np.ndarray, offset: Sequence[float]) -> np.ndarray:
    """Return a copy of ``matrix`` with its translation column set to ``offset``.

    The upper-left rotation/scale block and the bottom row are left unchanged.
    """
    out = np.array(matrix, dtype=np.float32)
    if out.shape != (16,):
        raise ValueError(f"Expected a flat matrix of 16 values, got shape {out.shape}")

    offset_v = np.asarray(offset, dtype=np.float32)
    if offset_v.shape != (3,):
        raise ValueError(f"Offset must have 3 components, got shape {offset_v.shape}")

    out[12:15] = offset_v
    return out


def transform_point(matrix: np.ndarray, point: Sequence[float]) -> np.ndarray:
    """Apply ``matrix`` to ``(x, y, z, 1)`` and return the homogeneous result."""
    x, y, z = point
    return _to_rows(matrix) @ np.array([x, y, z, 1.0], dtype=np.float32)
