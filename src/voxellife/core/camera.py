"""Orbit camera state and per-cell transform composition."""

import math
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from . import matrix
from .errors import ConfigurationError

ZOOM_MIN = 5.0
ZOOM_MAX = 30.0
DEFAULT_ZOOM = 25.0

# Radians (or zoom units) per pixel of drag / wheel delta
DRAG_SENSITIVITY = 0.01
WHEEL_SENSITIVITY = 0.01

WORLD_ORIGIN = (0.0, 0.0, 0.0)
WORLD_UP = (0.0, 1.0, 0.0)


def clamp_zoom(zoom: float) -> float:
    """Clamp a zoom distance to [ZOOM_MIN, ZOOM_MAX]."""
    return max(ZOOM_MIN, min(ZOOM_MAX, zoom))


@dataclass
class CameraState:
    """Orbit camera angles and distance, mutated by drag and wheel input."""

    angle_x: float = 0.0
    angle_y: float = 0.0
    zoom: float = DEFAULT_ZOOM

    def __post_init__(self) -> None:
        self.zoom = clamp_zoom(self.zoom)

    def rotate(self, dx: float, dy: float) -> None:
        """Apply a drag movement in pixels.

        Horizontal movement turns the camera around the vertical axis,
        vertical movement raises or lowers it.
        """
        self.angle_y += dx * DRAG_SENSITIVITY
        self.angle_x += dy * DRAG_SENSITIVITY

    def apply_wheel(self, delta: float) -> None:
        """Apply a wheel delta to the zoom distance."""
        self.set_zoom(self.zoom + delta * WHEEL_SENSITIVITY)

    def set_zoom(self, zoom: float) -> None:
        self.zoom = clamp_zoom(zoom)

    def eye(self) -> np.ndarray:
        """Eye position for the current angles and zoom."""
        return camera_eye_from_angles(self.angle_x, self.angle_y, self.zoom)


@dataclass(frozen=True)
class ProjectionSettings:
    """Perspective projection parameters."""

    fov_y: float = math.pi / 4
    near: float = 0.1
    far: float = 100.0

    def __post_init__(self) -> None:
        # Validate eagerly with a neutral aspect so bad settings fail at construction
        matrix.perspective(self.fov_y, 1.0, self.near, self.far)

    def projection_matrix(self, aspect: float) -> np.ndarray:
        return matrix.perspective(self.fov_y, aspect, self.near, self.far)


def camera_eye_from_angles(angle_x: float, angle_y: float, zoom: float) -> np.ndarray:
    """Convert orbit angles to an eye position.

    The camera circles the origin at radius ``zoom`` in the XZ plane
    (``angle_y`` is the azimuth) and sits at height ``2 * angle_x``.

    Returns:
        Eye position as a float32 array (x, y, z)
    """
    return np.array(
        [zoom * math.sin(angle_y), angle_x * 2.0, zoom * math.cos(angle_y)],
        dtype=np.float32,
    )


def view_projection(
    camera: CameraState,
    aspect: float,
    projection: ProjectionSettings = ProjectionSettings(),
) -> np.ndarray:
    """Combined projection * view matrix for the camera looking at the origin."""
    view = matrix.look_at(camera.eye(), WORLD_ORIGIN, WORLD_UP)
    return matrix.multiply(projection.projection_matrix(aspect), view)


def cell_world_position(
    x: int,
    y: int,
    z: int,
    edge: int,
    cell_size: float = 2.0,
    spacing: float = 0.3,
) -> Tuple[float, float, float]:
    """World-space offset of a grid cell, centered on the origin.

    Each axis maps to ``(coord - edge / 2) * (cell_size + spacing)``.

    Raises:
        ConfigurationError: If cell_size is not a positive finite number or
            spacing is negative or not finite
    """
    if not (math.isfinite(cell_size) and cell_size > 0):
        raise ConfigurationError(f"Cell size must be positive, got {cell_size}")
    if not (math.isfinite(spacing) and spacing >= 0):
        raise ConfigurationError(f"Spacing must be non-negative, got {spacing}")

    pitch = cell_size + spacing
    half = edge / 2
    return ((x - half) * pitch, (y - half) * pitch, (z - half) * pitch)


def cell_mvp(
    view_proj: np.ndarray,
    x: int,
    y: int,
    z: int,
    edge: int,
    cell_size: float = 2.0,
    spacing: float = 0.3,
) -> np.ndarray:
    """Model-view-projection matrix for a single cell."""
    model = matrix.translate(matrix.identity(), cell_world_position(x, y, z, edge, cell_size, spacing))
    return matrix.multiply(view_proj, model)
