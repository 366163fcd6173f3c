"""Command-line interface for the 3D voxel Game of Life."""

import argparse
import logging
import sys
import time
from typing import Any, Dict, Tuple

from ..core.config import SimulationConfig
from ..core.grid import VoxelGrid
from ..core.simulation import VoxelSimulation


class CLIVoxelLife:
    """Command-line interface for running voxel simulations headlessly."""

    def run_simulation(
        self,
        config: SimulationConfig,
        max_generations: int,
        verbose: bool = False,
        show_grid: bool = False,
    ) -> Tuple[int, str, Dict[str, Any]]:
        """Run a simulation until it stabilizes, cycles or hits the limit.

        Args:
            config: Simulation configuration
            max_generations: Maximum generations to run
            verbose: Print progress updates
            show_grid: Show initial and final grid states

        Returns:
            Tuple of (final_generation, finish_reason, statistics)
        """
        if verbose:
            print(f"Initializing {config.edge}x{config.edge}x{config.edge} grid")
            print(f"Generating random population (rate: {config.live_probability:.2%})")

        simulation = VoxelSimulation(config)
        initial_population = simulation.population

        if verbose:
            print(f"Initial population: {initial_population} cells")

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(simulation.grid))

        start_time = time.time()

        if verbose:
            print(f"\nRunning simulation (max {max_generations} generations)...")

        final_generation, reason = simulation.run_until_stable(max_generations)

        duration = time.time() - start_time

        stats = simulation.get_statistics()
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = final_generation / duration if duration > 0 else 0
        stats["initial_population"] = initial_population

        if show_grid and reason != "extinction":
            print(f"\nFinal grid (generation {final_generation}):")
            print(self._format_grid(simulation.grid))

        return final_generation, reason, stats

    def run_frames(
        self,
        config: SimulationConfig,
        frames: int,
        frame_ms: float,
        aspect: float,
        verbose: bool = False,
        show_grid: bool = False,
    ) -> Dict[str, Any]:
        """Drive the simulation through a headless frame loop.

        Every frame builds the per-cell transforms a renderer would upload,
        then reports the frame time to the scheduler.

        Args:
            config: Simulation configuration
            frames: Number of frames to run
            frame_ms: Simulated time between frames in milliseconds
            aspect: Viewport aspect ratio used for the projection
            verbose: Print a line whenever a generation advances
            show_grid: Show initial and final grid states

        Returns:
            Statistics dictionary including frame and transform counts
        """
        simulation = VoxelSimulation(config)
        initial_population = simulation.population

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(simulation.grid))

        simulation.start()

        transforms_built = 0
        max_transforms = 0
        start_time = time.time()

        for frame in range(frames):
            transforms = simulation.frame_transforms(aspect)
            transforms_built += len(transforms)
            max_transforms = max(max_transforms, len(transforms))

            if simulation.advance(frame_ms) and verbose:
                print(
                    f"Frame {frame + 1}: generation {simulation.generation}, "
                    f"population {simulation.population}"
                )

        duration = time.time() - start_time

        if show_grid:
            print(f"\nFinal grid (generation {simulation.generation}):")
            print(self._format_grid(simulation.grid))

        stats = simulation.get_statistics()
        stats["frames"] = frames
        stats["initial_population"] = initial_population
        stats["transforms_built"] = transforms_built
        stats["max_transforms_per_frame"] = max_transforms
        stats["duration_seconds"] = duration
        stats["frames_per_second"] = frames / duration if duration > 0 else 0
        return stats

    def _format_grid(self, grid: VoxelGrid, max_size: int = 20) -> str:
        """Format a grid layer by layer for display."""
        if grid.edge > max_size:
            return f"Grid too large to display ({grid.edge}x{grid.edge}x{grid.edge})"
        return str(grid)


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run 3D voxel Game of Life simulations from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Rule: a live cell survives with 5 or 6 of its 26 neighbors,
a dead cell is born with exactly 6. The grid does not wrap.

Examples:
  # Run the default 10x10x10 grid with half the cells alive
  voxellife-cli

  # Reproducible run on a 6-cell cube, printing every layer
  voxellife-cli --edge 6 --seed 42 --show-grid --verbose

  # Headless frame loop: 600 frames at 60 fps, one generation every 250 ms
  voxellife-cli --frames 600 --frame-ms 16.7 --interval-ms 250 --verbose
        """,
    )

    parser.add_argument("-N", "--edge", type=int, default=10, help="Grid edge length (default: 10)")

    parser.add_argument(
        "-p",
        "--population",
        type=float,
        default=0.5,
        help="Initial random population rate 0.0-1.0 (default: 0.5)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible initial grid",
    )

    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        default=1000,
        help="Maximum generations to simulate (default: 1000)",
    )

    # Frame loop configuration
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Run a headless frame loop for this many frames instead of running until stable",
    )

    parser.add_argument(
        "--frame-ms",
        type=float,
        default=16.0,
        help="Simulated milliseconds per frame (default: 16)",
    )

    parser.add_argument(
        "--interval-ms",
        type=float,
        default=1000.0,
        help="Milliseconds between generations in the frame loop (default: 1000)",
    )

    parser.add_argument(
        "--aspect",
        type=float,
        default=16 / 9,
        help="Viewport aspect ratio for projection (default: 16/9)",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final grid layers (small grids only)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for simulation internals (default: WARNING)",
    )

    return parser


def format_finish_reason(reason: str, stats: dict) -> str:
    """Format the simulation finish reason for display."""
    if reason == "extinction":
        return "Extinction (all cells died)"
    elif reason == "cycle":
        cycle_length = stats.get("cycle_length", 0)
        start_gen = stats.get("cycle_start_generation", 0)
        return f"Cycle detected (length {cycle_length}, started at generation {start_gen})"
    elif reason == "max_generations":
        return f"Maximum generations reached ({stats.get('generation', 0)})"
    else:
        return reason


def print_results(final_generation: int, reason: str, stats: dict, verbose: bool) -> None:
    """Print simulation results.

    Args:
        final_generation: Final generation number
        reason: Finish reason
        stats: Statistics dictionary
        verbose: Whether to show detailed statistics
    """
    print(f"\nSimulation completed after {final_generation} generations")
    print(f"Finish reason: {format_finish_reason(reason, stats)}")

    if verbose:
        edge = stats["grid_size"][0]
        print("\nDetailed Statistics:")
        print(f"  Grid size: {edge}x{edge}x{edge}")
        print(f"  Initial population: {stats['initial_population']}")
        print(f"  Final population: {stats['population']}")
        print(f"  Population density: {stats['population_density']:.2%}")
        print(f"  Population change rate: {stats['population_change_rate']:.2f}")
        if "duration_seconds" in stats:
            print(f"  Duration: {stats['duration_seconds']:.3f} seconds")
            print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")

        if stats["bounding_box"]:
            bbox = stats["bounding_box"]
            size = stats["bounding_box_size"]
            print(
                f"  Bounding box: ({bbox[0]}, {bbox[1]}, {bbox[2]}) to ({bbox[3]}, {bbox[4]}, {bbox[5]}) "
                f"[{size[0]}x{size[1]}x{size[2]}]"
            )
    else:
        print(
            "Population: {} → {}, "
            "Duration: {:.3f}s, "
            "Speed: {:.0f} gen/s".format(
                stats["initial_population"],
                stats["population"],
                stats.get("duration_seconds", 0),
                stats.get("generations_per_second", 0),
            )
        )


def print_frame_results(stats: dict) -> None:
    """Print the summary of a headless frame loop."""
    print(f"\nRendered {stats['frames']} frames, advanced {stats['generation']} generations")
    print(f"Population: {stats['initial_population']} → {stats['population']}")
    print(
        f"Cell transforms built: {stats['transforms_built']} "
        f"(max {stats['max_transforms_per_frame']} per frame)"
    )
    print(f"Duration: {stats['duration_seconds']:.3f}s, {stats['frames_per_second']:.0f} frames/s")


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.edge <= 0:
        errors.append("Edge must be positive")

    if not 0.0 <= args.population <= 1.0:
        errors.append("Population rate must be between 0.0 and 1.0")

    if args.max_generations <= 0:
        errors.append("Max generations must be positive")

    if getattr(args, "frames", 0) < 0:
        errors.append("Frames must be non-negative")

    if getattr(args, "frame_ms", 0) < 0:
        errors.append("Frame time must be non-negative")

    if getattr(args, "interval_ms", 0) < 0:
        errors.append("Interval must be non-negative")

    if getattr(args, "aspect", 1) <= 0:
        errors.append("Aspect ratio must be positive")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Build a simulation configuration from parsed arguments."""
    return SimulationConfig(
        edge=args.edge,
        live_probability=args.population,
        update_interval_ms=args.interval_ms,
        seed=args.seed,
    )


def main() -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if not validate_args(args):
        return 1

    cli = CLIVoxelLife()

    try:
        config = config_from_args(args)

        if args.frames:
            stats = cli.run_frames(
                config,
                frames=args.frames,
                frame_ms=args.frame_ms,
                aspect=args.aspect,
                verbose=args.verbose,
                show_grid=args.show_grid,
            )
            print_frame_results(stats)
            return 0

        final_generation, reason, stats = cli.run_simulation(
            config,
            max_generations=args.max_generations,
            verbose=args.verbose,
            show_grid=args.show_grid,
        )
        print_results(final_generation, reason, stats, args.verbose)
        return 0

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
