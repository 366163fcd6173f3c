"""Simulation configuration."""

import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .camera import ProjectionSettings, ZOOM_MAX, ZOOM_MIN
from .errors import ConfigurationError


@dataclass
class SimulationConfig:
    """Configuration for a voxel simulation session."""

    edge: int = 10
    live_probability: float = 0.5
    update_interval_ms: float = 1000.0
    cell_size: float = 2.0
    spacing: float = 0.3
    fov_y: float = math.pi / 4
    near: float = 0.1
    far: float = 100.0
    initial_zoom: float = 25.0
    seed: Optional[int] = None

    def errors(self) -> List[str]:
        """Collect every validation problem with this configuration."""
        errors = []

        if isinstance(self.edge, bool) or not isinstance(self.edge, (int, np.integer)) or self.edge < 1:
            errors.append("Edge must be a positive integer")

        if not 0.0 <= self.live_probability <= 1.0:
            errors.append("Live probability must be between 0.0 and 1.0")

        if not self.update_interval_ms >= 0:
            errors.append("Update interval must be non-negative")

        if not (math.isfinite(self.cell_size) and self.cell_size > 0):
            errors.append("Cell size must be positive")

        if not (math.isfinite(self.spacing) and self.spacing >= 0):
            errors.append("Spacing must be non-negative")

        if not 0.0 < self.fov_y < math.pi:
            errors.append("Field of view must be between 0 and pi radians")

        if not self.near > 0:
            errors.append("Near plane must be positive")

        if not (math.isfinite(self.far) and self.far > self.near):
            errors.append("Far plane must be beyond the near plane")

        if not ZOOM_MIN <= self.initial_zoom <= ZOOM_MAX:
            errors.append(f"Initial zoom must be between {ZOOM_MIN:g} and {ZOOM_MAX:g}")

        return errors

    def validate(self) -> None:
        """Raise if the configuration is invalid.

        Raises:
            ConfigurationError: Listing every problem found
        """
        errors = self.errors()
        if errors:
            raise ConfigurationError("Invalid configuration: " + "; ".join(errors))

    def projection(self) -> ProjectionSettings:
        return ProjectionSettings(fov_y=self.fov_y, near=self.near, far=self.far)
