"""Core voxel automaton logic and projection math."""

from .errors import ConfigurationError, DegenerateGeometryError, VoxelLifeError
from .grid import VoxelGrid
from .automaton import VoxelAutomaton
from .camera import CameraState, ProjectionSettings, camera_eye_from_angles, cell_world_position
from .config import SimulationConfig
from .scheduler import RunState, StepScheduler
from .simulation import VoxelSimulation

__all__ = [
    "ConfigurationError",
    "DegenerateGeometryError",
    "VoxelLifeError",
    "VoxelGrid",
    "VoxelAutomaton",
    "CameraState",
    "ProjectionSettings",
    "camera_eye_from_angles",
    "cell_world_position",
    "SimulationConfig",
    "RunState",
    "StepScheduler",
    "VoxelSimulation",
]
