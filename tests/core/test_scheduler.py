"""Tests for the frame-driven step scheduler."""

import pytest
from voxellife.core.errors import ConfigurationError
from voxellife.core.scheduler import RunState, StepScheduler


class TestStepScheduler:
    """Test cases for StepScheduler."""

    def test_initial_state(self):
        """A new scheduler is idle with nothing accumulated."""
        scheduler = StepScheduler()
        assert scheduler.state is RunState.IDLE
        assert not scheduler.running
        assert scheduler.update_interval_ms == 1000.0
        assert scheduler.elapsed_ms == 0.0

    def test_idle_never_steps(self):
        """Ticks while idle neither step nor accumulate time."""
        scheduler = StepScheduler(100)
        assert scheduler.tick(5000) is False
        assert scheduler.elapsed_ms == 0.0

    def test_steps_when_interval_reached(self):
        """A generation is due once accumulated time reaches the interval."""
        scheduler = StepScheduler(1000)
        scheduler.start()

        assert scheduler.tick(400) is False
        assert scheduler.tick(599) is False
        assert scheduler.tick(1) is True
        assert scheduler.elapsed_ms == 0.0

    def test_at_most_one_step_per_tick(self):
        """A long frame triggers one step and the remainder is dropped."""
        scheduler = StepScheduler(100)
        scheduler.start()

        assert scheduler.tick(350) is True
        assert scheduler.tick(0) is False
        assert scheduler.tick(99) is False
        assert scheduler.tick(1) is True

    def test_zero_interval_steps_every_tick(self):
        """With no interval every running tick steps."""
        scheduler = StepScheduler(0)
        scheduler.start()
        assert all(scheduler.tick(0) for _ in range(5))

    def test_pause_and_resume(self):
        """Paused ticks are ignored; accumulated time survives a pause."""
        scheduler = StepScheduler(1000)
        scheduler.start()
        scheduler.tick(600)

        scheduler.pause()
        assert scheduler.state is RunState.PAUSED
        assert scheduler.tick(1000) is False

        scheduler.resume()
        assert scheduler.state is RunState.RUNNING
        assert scheduler.tick(400) is True

    def test_start_only_leaves_idle(self):
        """start does not override a pause; resume does."""
        scheduler = StepScheduler()
        scheduler.start()
        scheduler.pause()

        scheduler.start()
        assert scheduler.state is RunState.PAUSED

    def test_resume_and_pause_ignored_when_idle(self):
        """Pause and resume have no effect before start."""
        scheduler = StepScheduler()
        scheduler.pause()
        assert scheduler.state is RunState.IDLE
        scheduler.resume()
        assert scheduler.state is RunState.IDLE

    def test_reset(self):
        """Reset returns to idle and clears accumulated time."""
        scheduler = StepScheduler(1000)
        scheduler.start()
        scheduler.tick(700)

        scheduler.reset()
        assert scheduler.state is RunState.IDLE
        assert scheduler.elapsed_ms == 0.0

        scheduler.start()
        assert scheduler.tick(700) is False

    def test_change_interval(self):
        """The interval can be changed while running."""
        scheduler = StepScheduler(1000)
        scheduler.start()
        scheduler.tick(300)

        scheduler.update_interval_ms = 250
        assert scheduler.update_interval_ms == 250.0
        assert scheduler.tick(0) is True

    @pytest.mark.parametrize("interval", [-1, float("nan")])
    def test_invalid_interval(self, interval):
        """Negative or NaN intervals are configuration errors."""
        with pytest.raises(ConfigurationError):
            StepScheduler(interval)

        scheduler = StepScheduler()
        with pytest.raises(ConfigurationError):
            scheduler.update_interval_ms = interval

    def test_negative_elapsed(self):
        """Time cannot run backwards."""
        scheduler = StepScheduler()
        scheduler.start()
        with pytest.raises(ValueError):
            scheduler.tick(-1)

    def test_nan_elapsed(self):
        """A NaN frame time is rejected and does not poison the accumulator."""
        scheduler = StepScheduler(100)
        scheduler.start()
        with pytest.raises(ValueError):
            scheduler.tick(float("nan"))

        assert scheduler.elapsed_ms == 0.0
        assert scheduler.tick(100) is True
