"""Frame-driven generation scheduling."""

import enum
import logging

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_INTERVAL_MS = 1000.0


class RunState(enum.Enum):
    """Lifecycle of a simulation."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class StepScheduler:
    """Decides on which frames a generation should advance.

    The caller reports elapsed time for every frame through ``tick``; once the
    simulation is running and the accumulated time reaches the update
    interval, ``tick`` returns True and the accumulator starts over. At most
    one generation is due per tick. No clock is read here.
    """

    def __init__(self, update_interval_ms: float = DEFAULT_UPDATE_INTERVAL_MS) -> None:
        self._update_interval_ms = self._validate_interval(update_interval_ms)
        self._state = RunState.IDLE
        self._elapsed_ms = 0.0

    @staticmethod
    def _validate_interval(value: float) -> float:
        if not value >= 0:
            raise ConfigurationError(f"Update interval must be non-negative, got {value}")
        return float(value)

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is RunState.RUNNING

    @property
    def elapsed_ms(self) -> float:
        """Time accumulated since the last generation was due."""
        return self._elapsed_ms

    @property
    def update_interval_ms(self) -> float:
        return self._update_interval_ms

    @update_interval_ms.setter
    def update_interval_ms(self, value: float) -> None:
        self._update_interval_ms = self._validate_interval(value)

    def start(self) -> None:
        """Leave the idle state and begin advancing generations."""
        if self._state is RunState.IDLE:
            logger.info("Simulation started")
            self._state = RunState.RUNNING
            self._elapsed_ms = 0.0

    def pause(self) -> None:
        if self._state is RunState.RUNNING:
            logger.info("Simulation paused")
            self._state = RunState.PAUSED

    def resume(self) -> None:
        if self._state is RunState.PAUSED:
            logger.info("Simulation resumed")
            self._state = RunState.RUNNING

    def reset(self) -> None:
        """Return to the idle state and forget accumulated time."""
        self._state = RunState.IDLE
        self._elapsed_ms = 0.0

    def tick(self, elapsed_ms: float) -> bool:
        """Account for one frame.

        Args:
            elapsed_ms: Time since the previous frame in milliseconds

        Returns:
            True if one generation should be advanced on this frame

        Raises:
            ValueError: If elapsed_ms is negative or NaN
        """
        if not elapsed_ms >= 0:
            raise ValueError(f"Elapsed time must be non-negative, got {elapsed_ms}")

        if not self.running:
            return False

        self._elapsed_ms += elapsed_ms
        if self._elapsed_ms >= self._update_interval_ms:
            self._elapsed_ms = 0.0
            return True
        return False
