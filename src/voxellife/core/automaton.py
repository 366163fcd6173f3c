"""3D Game of Life transition rule over the 26-cell Moore neighborhood."""

import logging
from typing import FrozenSet, Optional
import numpy as np

from .grid import VoxelGrid

logger = logging.getLogger(__name__)


class VoxelAutomaton:
    """Rule engine for the voxel automaton.

    Implements the fixed rule:
    - Live cell with 5 or 6 neighbors survives
    - Dead cell with exactly 6 neighbors becomes alive
    - All other cells die or stay dead

    Every operation is a pure function of its input grid; ``step`` always
    returns a new grid and never writes to the one it reads.
    """

    SURVIVE: FrozenSet[int] = frozenset({5, 6})
    BIRTH: FrozenSet[int] = frozenset({6})

    @staticmethod
    def initialize(
        edge: int,
        live_probability: float = 0.5,
        rng: Optional[np.random.Generator] = None,
    ) -> VoxelGrid:
        """Create a randomly populated grid.

        Args:
            edge: Edge length of the cube
            live_probability: Chance each cell starts alive (0.0 to 1.0)
            rng: Source of uniform draws; a fresh generator if omitted

        Returns:
            Populated grid

        Raises:
            ConfigurationError: If edge or live_probability is invalid
        """
        grid = VoxelGrid(edge)
        grid.randomize(live_probability, rng)
        logger.debug(
            "Initialized %dx%dx%d grid with p=%.3f (%d alive)",
            edge,
            edge,
            edge,
            live_probability,
            grid.population,
        )
        return grid

    @staticmethod
    def neighbor_count(grid: VoxelGrid, x: int, y: int, z: int) -> int:
        """Count live neighbors of (x, y, z); positions outside the grid count as dead."""
        return grid.get_neighbors(x, y, z)

    @staticmethod
    def count_all_neighbors(grid: VoxelGrid) -> np.ndarray:
        """Vectorized neighbor counts for every cell, in flat index order."""
        return grid.count_all_neighbors()

    @staticmethod
    def is_alive(grid: VoxelGrid, x: int, y: int, z: int) -> bool:
        """Whether the cell at (x, y, z) is alive."""
        return grid.get_cell(x, y, z)

    @classmethod
    def next_state(cls, alive: bool, neighbors: int) -> bool:
        """Apply the transition rule to a single cell."""
        if alive:
            return neighbors in cls.SURVIVE
        return neighbors in cls.BIRTH

    @classmethod
    def step(cls, grid: VoxelGrid) -> VoxelGrid:
        """Advance a grid by one generation.

        Args:
            grid: Current generation (left untouched)

        Returns:
            New grid holding the next generation
        """
        # All counts come from the pre-step snapshot
        neighbor_counts = grid.count_all_neighbors()
        alive = grid.cells > 0

        survive_mask = alive & np.isin(neighbor_counts, list(cls.SURVIVE))
        birth_mask = ~alive & np.isin(neighbor_counts, list(cls.BIRTH))

        return VoxelGrid.from_cells(grid.edge, survive_mask | birth_mask)
