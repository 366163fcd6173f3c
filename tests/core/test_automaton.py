"""Tests for the VoxelAutomaton rule engine."""

import itertools

import numpy as np
import pytest
from voxellife.core.automaton import VoxelAutomaton
from voxellife.core.errors import ConfigurationError
from voxellife.core.grid import VoxelGrid

CENTER = (1, 1, 1)
NEIGHBOR_OFFSETS = [
    offset for offset in itertools.product((-1, 0, 1), repeat=3) if offset != (0, 0, 0)
]


def center_with_neighbors(alive: bool, neighbors: int) -> VoxelGrid:
    """3x3x3 grid whose center has exactly ``neighbors`` live neighbors."""
    grid = VoxelGrid(3)
    grid.set_cell(*CENTER, alive)
    for dx, dy, dz in NEIGHBOR_OFFSETS[:neighbors]:
        grid.set_cell(1 + dx, 1 + dy, 1 + dz, True)
    return grid


class TestInitialize:
    """Test cases for grid initialization."""

    def test_full_grid(self):
        """Probability 1.0 makes every cell alive."""
        grid = VoxelAutomaton.initialize(3, 1.0, np.random.default_rng(0))
        assert grid.edge == 3
        assert grid.population == 27

    def test_empty_grid(self):
        """Probability 0.0 leaves every cell dead."""
        grid = VoxelAutomaton.initialize(4, 0.0, np.random.default_rng(0))
        assert grid.population == 0

    def test_default_probability(self):
        """The default probability populates roughly half the cells."""
        grid = VoxelAutomaton.initialize(10, rng=np.random.default_rng(42))
        assert 400 <= grid.population <= 600

    def test_without_rng(self):
        """A generator is created when none is passed."""
        grid = VoxelAutomaton.initialize(2, 1.0)
        assert grid.population == 8

    def test_seeded_initialization_is_reproducible(self):
        """Equal seeds give equal grids."""
        grid1 = VoxelAutomaton.initialize(5, 0.3, np.random.default_rng(11))
        grid2 = VoxelAutomaton.initialize(5, 0.3, np.random.default_rng(11))
        assert grid1 == grid2

    @pytest.mark.parametrize("edge", [0, -1])
    def test_invalid_edge(self, edge):
        """Non-positive edges fail fast."""
        with pytest.raises(ConfigurationError):
            VoxelAutomaton.initialize(edge, 0.5)

    @pytest.mark.parametrize("probability", [-0.01, 1.01])
    def test_invalid_probability(self, probability):
        """Probabilities outside [0, 1] fail fast."""
        with pytest.raises(ConfigurationError):
            VoxelAutomaton.initialize(3, probability)


class TestNeighborCount:
    """Test cases for neighbor counting."""

    def test_single_cell_grid(self):
        """With N=1 every neighbor position is out of bounds."""
        grid = VoxelGrid(1)
        grid.set_cell(0, 0, 0, True)
        assert VoxelAutomaton.neighbor_count(grid, 0, 0, 0) == 0

    def test_corner_counts_at_most_seven(self):
        """A corner sees only the 7 in-bounds positions of its neighborhood."""
        grid = VoxelAutomaton.initialize(4, 1.0, np.random.default_rng(0))
        for corner in itertools.product((0, 3), repeat=3):
            assert VoxelAutomaton.neighbor_count(grid, *corner) == 7

    def test_controlled_counts(self):
        """The helper grid produces every count from 0 to 26."""
        for n in range(27):
            grid = center_with_neighbors(False, n)
            assert VoxelAutomaton.neighbor_count(grid, *CENTER) == n

    def test_vectorized_matches_scalar(self):
        """Vectorized counts agree with the per-cell rule on random grids."""
        for seed in range(3):
            grid = VoxelAutomaton.initialize(4, 0.5, np.random.default_rng(seed))
            counts = VoxelAutomaton.count_all_neighbors(grid)
            for x, y, z in itertools.product(range(4), repeat=3):
                assert counts[grid.index(x, y, z)] == VoxelAutomaton.neighbor_count(grid, x, y, z)


class TestRule:
    """Test cases for the transition rule."""

    @pytest.mark.parametrize("neighbors", range(27))
    def test_live_cell(self, neighbors):
        """A live cell survives only with 5 or 6 neighbors."""
        grid = center_with_neighbors(True, neighbors)
        result = VoxelAutomaton.step(grid)
        assert result.get_cell(*CENTER) is (neighbors in (5, 6))

    @pytest.mark.parametrize("neighbors", range(27))
    def test_dead_cell(self, neighbors):
        """A dead cell is born only with exactly 6 neighbors."""
        grid = center_with_neighbors(False, neighbors)
        result = VoxelAutomaton.step(grid)
        assert result.get_cell(*CENTER) is (neighbors == 6)

    def test_next_state_table(self):
        """Test the single-cell rule directly."""
        assert VoxelAutomaton.next_state(True, 5)
        assert VoxelAutomaton.next_state(True, 6)
        assert not VoxelAutomaton.next_state(True, 4)
        assert not VoxelAutomaton.next_state(True, 7)
        assert VoxelAutomaton.next_state(False, 6)
        assert not VoxelAutomaton.next_state(False, 5)
        assert not VoxelAutomaton.next_state(False, 7)

    def test_step_matches_next_state(self):
        """The vectorized step applies next_state to every cell."""
        grid = VoxelAutomaton.initialize(5, 0.25, np.random.default_rng(3))
        result = VoxelAutomaton.step(grid)

        for x, y, z in itertools.product(range(5), repeat=3):
            expected = VoxelAutomaton.next_state(grid.get_cell(x, y, z), grid.get_neighbors(x, y, z))
            assert result.get_cell(x, y, z) is expected


class TestStep:
    """Test cases for stepping whole grids."""

    def test_shape_preserved(self):
        """The next generation has the same edge and length."""
        grid = VoxelAutomaton.initialize(6, 0.5, np.random.default_rng(5))
        result = VoxelAutomaton.step(grid)
        assert result.edge == grid.edge
        assert result.cells.shape == grid.cells.shape

    def test_returns_new_grid(self):
        """The input grid is left untouched."""
        grid = VoxelAutomaton.initialize(5, 0.5, np.random.default_rng(8))
        before = grid.copy()

        result = VoxelAutomaton.step(grid)

        assert result is not grid
        assert grid == before

    def test_step_is_pure(self):
        """Stepping the same input twice gives identical outputs."""
        grid = VoxelAutomaton.initialize(6, 0.5, np.random.default_rng(21))
        assert VoxelAutomaton.step(grid) == VoxelAutomaton.step(grid)

    def test_full_grid_dies_in_one_step(self):
        """A full 3x3x3 grid has no cell with 5 or 6 neighbors."""
        grid = VoxelAutomaton.initialize(3, 1.0, np.random.default_rng(0))
        result = VoxelAutomaton.step(grid)
        assert result.population == 0

    def test_single_cell_grid(self):
        """A lone cell in a 1x1x1 grid dies."""
        grid = VoxelGrid(1)
        grid.set_cell(0, 0, 0, True)
        assert VoxelAutomaton.step(grid).population == 0

    def test_block_dies(self):
        """A 2x2x2 block is overcrowded (7 neighbors each) and births nothing."""
        grid = VoxelGrid(4)
        for x, y, z in itertools.product((1, 2), repeat=3):
            grid.set_cell(x, y, z, True)

        assert VoxelAutomaton.step(grid).population == 0

    def test_empty_grid_stays_empty(self):
        """Nothing is born from nothing."""
        grid = VoxelGrid(5)
        assert VoxelAutomaton.step(grid).population == 0

    def test_is_alive(self):
        """Test the cell query operation."""
        grid = VoxelGrid(3)
        grid.set_cell(2, 1, 0, True)
        assert VoxelAutomaton.is_alive(grid, 2, 1, 0)
        assert not VoxelAutomaton.is_alive(grid, 0, 1, 2)
