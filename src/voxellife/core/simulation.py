"""Voxel Game of Life simulation state."""

import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

import numpy as np

from .automaton import VoxelAutomaton
from .camera import CameraState, cell_mvp, view_projection
from .config import SimulationConfig
from .grid import VoxelGrid
from .scheduler import RunState, StepScheduler

logger = logging.getLogger(__name__)

CellTransform = Tuple[Tuple[int, int, int], np.ndarray]


class VoxelSimulation:
    """Owns everything a presentation loop mutates between frames.

    Holds the current grid, the camera, and the step scheduler, and tracks
    generation count, population history and cycles. Each step replaces the
    grid with a new one computed by ``VoxelAutomaton.step``.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        grid: Optional[VoxelGrid] = None,
    ) -> None:
        """Initialize the simulation.

        Args:
            config: Simulation configuration (defaults if omitted)
            grid: Starting grid; a random one is drawn from the config if omitted

        Raises:
            ConfigurationError: If the configuration is invalid
            ValueError: If grid's edge differs from the configured edge
        """
        self.config = config or SimulationConfig()
        self.config.validate()
        self.projection = self.config.projection()

        self._rng = np.random.default_rng(self.config.seed)

        if grid is None:
            grid = self._random_grid()
        elif grid.edge != self.config.edge:
            raise ValueError(f"Grid edge {grid.edge} doesn't match configured edge {self.config.edge}")

        self.grid = grid
        self.camera = CameraState(zoom=self.config.initial_zoom)
        self.scheduler = StepScheduler(self.config.update_interval_ms)

        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[bytes] = deque(maxlen=1000)
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._update_population_history()

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "VoxelSimulation":
        return cls(config)

    def _random_grid(self) -> VoxelGrid:
        return VoxelAutomaton.initialize(self.config.edge, self.config.live_probability, self._rng)

    @property
    def state(self) -> RunState:
        return self.scheduler.state

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def population_history(self) -> list:
        """History of population counts."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        return self._cycle_start_generation

    def start(self) -> None:
        self.scheduler.start()

    def pause(self) -> None:
        self.scheduler.pause()

    def resume(self) -> None:
        self.scheduler.resume()

    def step(self) -> None:
        """Advance the simulation by one generation, whatever the run state."""
        self._check_for_cycles()

        self.grid = VoxelAutomaton.step(self.grid)

        self._generation += 1
        self._update_population_history()

    def advance(self, elapsed_ms: float) -> bool:
        """Report one frame's elapsed time and step if a generation is due.

        Returns:
            True if a generation was advanced on this frame
        """
        if self.scheduler.tick(elapsed_ms):
            self.step()
            return True
        return False

    def frame_transforms(self, aspect: float) -> List[CellTransform]:
        """Model-view-projection matrices for every live cell.

        Args:
            aspect: Viewport width divided by height

        Returns:
            List of ((x, y, z), mvp) pairs in flat index order
        """
        view_proj = view_projection(self.camera, aspect, self.projection)
        edge = self.grid.edge
        return [
            (cell, cell_mvp(view_proj, *cell, edge, self.config.cell_size, self.config.spacing))
            for cell in self.grid.living_cells()
        ]

    def _update_population_history(self) -> None:
        self._population_history.append(self.population)

    def _check_for_cycles(self) -> None:
        """Check if the current state has been seen before (cycle detection)."""
        if self._cycle_detected:
            return

        current_state = self.grid.cells.tobytes()

        if current_state in self._seen_states:
            first_occurrence = self._seen_states[current_state]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence
            logger.info(
                "Cycle of length %d detected at generation %d",
                self._cycle_length,
                self._generation,
            )
            return

        if len(self._state_history) == self._state_history.maxlen:
            # Forget the oldest state before the deque drops it
            oldest = self._state_history[0]
            if self._seen_states.get(oldest) == self._generation - len(self._state_history):
                del self._seen_states[oldest]

        self._seen_states[current_state] = self._generation
        self._state_history.append(current_state)

    def reset(self, reseed: bool = True) -> None:
        """Reset the simulation to the idle state at generation 0.

        Args:
            reseed: Whether to draw a fresh random grid; otherwise the current
                grid becomes the new starting point
        """
        if reseed:
            self.grid = self._random_grid()

        self.scheduler.reset()
        self._generation = 0
        self._population_history.clear()
        self._state_history.clear()
        self._seen_states.clear()
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._update_population_history()
        logger.info("Simulation reset (population %d)", self.population)

    def run_until_stable(self, max_generations: int = 1000) -> Tuple[int, str]:
        """Run simulation until it becomes stable or cycles.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            self.step()

            if self._cycle_detected:
                return self._generation, "cycle"

            if self.population == 0:
                return self._generation, "extinction"

        return self._generation, "max_generations"

    def get_population_change_rate(self, window_size: int = 10) -> float:
        """Calculate recent population change rate.

        Args:
            window_size: Number of recent generations to consider

        Returns:
            Average population change per generation
        """
        recent_history = list(self._population_history)[-window_size:]
        if len(recent_history) < 2:
            return 0.0

        return float(np.mean(np.diff(recent_history)))

    def get_statistics(self) -> Dict[str, Any]:
        """Get simulation statistics.

        Returns:
            Dictionary with various statistics
        """
        bbox = self.grid.get_bounding_box()
        edge = self.grid.edge

        stats: Dict[str, Any] = {
            "generation": self._generation,
            "population": self.population,
            "population_change_rate": self.get_population_change_rate(),
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": self.grid.shape,
            "population_density": self.population / self.grid.size,
            "state": self.state.value,
        }

        if bbox:
            stats["bounding_box"] = bbox
            size = (bbox[3] - bbox[0] + 1, bbox[4] - bbox[1] + 1, bbox[5] - bbox[2] + 1)
            stats["bounding_box_size"] = size
            stats["bounding_box_volume"] = size[0] * size[1] * size[2]
        else:
            stats["bounding_box"] = None
            stats["bounding_box_size"] = (0, 0, 0)
            stats["bounding_box_volume"] = 0

        return stats
