"""3D cellular automaton package with voxel Game of Life and camera math."""

__version__ = "0.1.0"

from .core.grid import VoxelGrid
from .core.automaton import VoxelAutomaton
from .core.simulation import VoxelSimulation
from .core.config import SimulationConfig

__all__ = ["VoxelGrid", "VoxelAutomaton", "VoxelSimulation", "SimulationConfig"]
