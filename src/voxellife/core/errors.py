"""Exception types raised by the voxel simulation core."""


class VoxelLifeError(Exception):
    """Base class for voxellife errors."""


class ConfigurationError(VoxelLifeError, ValueError):
    """Raised when a simulation, projection or scheduler parameter is invalid."""


class DegenerateGeometryError(VoxelLifeError, ValueError):
    """Raised when camera vectors cannot form an orthonormal view basis."""
