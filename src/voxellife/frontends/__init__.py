"""Frontend interfaces for the voxel automaton."""

from .cli import CLIVoxelLife

__all__ = ["CLIVoxelLife"]
