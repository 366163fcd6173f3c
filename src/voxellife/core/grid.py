"""Voxel grid data structure for 3D cellular automata."""

from typing import Iterator, Optional, Tuple
import numpy as np
import torch
import torch.nn.functional as F

from .errors import ConfigurationError


def _moore_kernel() -> torch.Tensor:
    kernel = torch.ones(3, 3, 3, dtype=torch.float32)
    kernel[1, 1, 1] = 0
    return kernel.unsqueeze(0).unsqueeze(0)


# 3x3x3 ones with a zero center: summing it over a cell gives its 26-neighbor count
_NEIGHBOR_KERNEL = _moore_kernel()


class VoxelGrid:
    """Represents a bounded cubic grid of voxels.

    Cells are stored as a flat numpy array of length ``edge ** 3`` indexed by
    ``x + y * edge + z * edge * edge`` (x varies fastest). The grid never wraps:
    positions outside ``[0, edge)`` on any axis do not exist.
    """

    def __init__(self, edge: int) -> None:
        """Initialize an empty grid.

        Args:
            edge: Edge length of the cube (number of cells per axis)

        Raises:
            ConfigurationError: If edge is not a positive integer
        """
        if isinstance(edge, bool) or not isinstance(edge, (int, np.integer)) or edge < 1:
            raise ConfigurationError(f"Grid edge must be a positive integer, got {edge!r}")

        self.edge = int(edge)
        self._cells = np.zeros(self.edge ** 3, dtype=np.int8)

    @classmethod
    def from_cells(cls, edge: int, cells: np.ndarray) -> "VoxelGrid":
        """Build a grid from a flat or (z, y, x) shaped array of cell states.

        Args:
            edge: Edge length of the cube
            cells: Array with ``edge ** 3`` elements; nonzero means alive

        Returns:
            New grid holding a copy of the given states

        Raises:
            ValueError: If the number of cells doesn't match the edge
        """
        grid = cls(edge)
        arr = np.asarray(cells)
        if arr.size != grid.size:
            raise ValueError(f"Expected {grid.size} cells for edge {edge}, got {arr.size}")

        grid._cells[:] = (arr.reshape(-1) != 0).astype(np.int8)
        return grid

    @property
    def cells(self) -> np.ndarray:
        """Get the flat cell array."""
        return self._cells

    @property
    def volume(self) -> np.ndarray:
        """Get a (z, y, x) shaped view of the cell array."""
        return self._cells.reshape(self.edge, self.edge, self.edge)

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self._cells.size

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Get grid dimensions as (edge, edge, edge)."""
        return (self.edge, self.edge, self.edge)

    def in_bounds(self, x: int, y: int, z: int) -> bool:
        """Check whether a coordinate lies inside the grid."""
        n = self.edge
        return 0 <= x < n and 0 <= y < n and 0 <= z < n

    def index(self, x: int, y: int, z: int) -> int:
        """Map a coordinate to its flat index.

        Raises:
            IndexError: If the coordinate is outside the grid
        """
        if not self.in_bounds(x, y, z):
            raise IndexError(f"Coordinates ({x}, {y}, {z}) out of bounds")
        return x + y * self.edge + z * self.edge * self.edge

    def coordinates(self, index: int) -> Tuple[int, int, int]:
        """Map a flat index back to its (x, y, z) coordinate.

        Raises:
            IndexError: If the index is outside [0, size)
        """
        if not 0 <= index < self.size:
            raise IndexError(f"Index {index} out of bounds")
        n = self.edge
        return (index % n, (index // n) % n, index // (n * n))

    def get_cell(self, x: int, y: int, z: int) -> bool:
        """Get the state of a cell.

        Returns:
            True if cell is alive, False if dead

        Raises:
            IndexError: If coordinates are out of bounds
        """
        return bool(self._cells[self.index(x, y, z)])

    def set_cell(self, x: int, y: int, z: int, alive: bool) -> None:
        """Set the state of a cell.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        self._cells[self.index(x, y, z)] = 1 if alive else 0

    def toggle_cell(self, x: int, y: int, z: int) -> bool:
        """Toggle the state of a cell and return its new state."""
        new_state = not self.get_cell(x, y, z)
        self.set_cell(x, y, z, new_state)
        return new_state

    def clear(self) -> None:
        """Clear all cells (set all to dead)."""
        self._cells.fill(0)

    def randomize(self, probability: float = 0.5, rng: Optional[np.random.Generator] = None) -> None:
        """Randomly populate the grid.

        Each cell is alive independently when its uniform [0, 1) draw falls
        below ``probability``.

        Args:
            probability: Chance each cell will be alive (0.0 to 1.0)
            rng: Random generator to draw from (a fresh one if omitted)

        Raises:
            ConfigurationError: If probability is outside [0, 1]
        """
        if not 0.0 <= probability <= 1.0:
            raise ConfigurationError(f"Live probability must be between 0.0 and 1.0, got {probability}")

        if rng is None:
            rng = np.random.default_rng()

        mask = rng.random(self.size) < probability
        self._cells[mask] = 1
        self._cells[~mask] = 0

    def copy(self) -> "VoxelGrid":
        """Return an independent copy of this grid."""
        return VoxelGrid.from_cells(self.edge, self._cells)

    def copy_from(self, other: "VoxelGrid") -> None:
        """Copy cell states from another grid.

        Raises:
            ValueError: If grids have different dimensions
        """
        if other.shape != self.shape:
            raise ValueError(f"Grid dimensions don't match: {other.shape} vs {self.shape}")

        self._cells[:] = other._cells

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.count_nonzero(self._cells))

    def get_neighbors(self, x: int, y: int, z: int) -> int:
        """Count living neighbors of a cell.

        Neighbors outside the grid count as dead.

        Returns:
            Number of living neighbors (0-26)
        """
        count = 0
        for dz in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    if dx == 0 and dy == 0 and dz == 0:
                        continue

                    nx, ny, nz = x + dx, y + dy, z + dz
                    if self.in_bounds(nx, ny, nz):
                        count += int(self._cells[nx + ny * self.edge + nz * self.edge * self.edge])

        return count

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbors for all cells using a PyTorch 3D convolution.

        Returns:
            Flat int8 array with the neighbor count of each cell, in the same
            index order as ``cells``
        """
        volume = torch.from_numpy(self.volume.astype(np.float32)).unsqueeze(0).unsqueeze(0)

        # Zero padding keeps the grid bounded
        neighbors = F.conv3d(volume, _NEIGHBOR_KERNEL, padding=1)

        return neighbors[0, 0].round().to(torch.int8).numpy().reshape(-1)

    def living_cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (x, y, z) coordinates of living cells in flat index order."""
        for index in np.flatnonzero(self._cells):
            yield self.coordinates(int(index))

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_x, min_y, min_z, max_x, max_y, max_z) or None if no
            living cells
        """
        zs, ys, xs = np.nonzero(self.volume)
        if len(xs) == 0:
            return None

        return (
            int(xs.min()),
            int(ys.min()),
            int(zs.min()),
            int(xs.max()),
            int(ys.max()),
            int(zs.max()),
        )

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, VoxelGrid):
            return False
        return self.edge == other.edge and np.array_equal(self._cells, other._cells)

    def __str__(self) -> str:
        """Layer-by-layer view with living cells as '*' and dead as '.'."""
        layers = []
        volume = self.volume
        for z in range(self.edge):
            rows = ["".join("*" if volume[z, y, x] else "." for x in range(self.edge)) for y in range(self.edge)]
            layers.append(f"z={z}\n" + "\n".join(rows))
        return "\n\n".join(layers)
