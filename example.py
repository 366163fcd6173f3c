#!/usr/bin/env python3
"""
Example usage of the voxellife package.
"""

from voxellife import SimulationConfig, VoxelSimulation


def main():
    """Demonstrate programmatic usage of the voxellife package."""
    # A small reproducible cube
    config = SimulationConfig(edge=6, live_probability=0.3, seed=7, update_interval_ms=250)
    simulation = VoxelSimulation(config)

    print("Initial state:")
    print(simulation.grid)
    print(f"Population: {simulation.population}")
    print()

    # Drive it like a renderer would: one call per 60 fps frame
    simulation.start()
    for frame in range(120):
        transforms = simulation.frame_transforms(aspect=16 / 9)
        if simulation.advance(1000 / 60):
            print(
                f"Frame {frame + 1}: generation {simulation.generation}, "
                f"population {simulation.population}, {len(transforms)} cubes drawn"
            )

            if simulation.cycle_detected:
                print(f"Cycle detected! Length: {simulation.cycle_length}")
                break

        # Slowly orbit the camera
        simulation.camera.rotate(2, 0)

    # Show statistics
    stats = simulation.get_statistics()
    print("\nFinal statistics:")
    for key, value in stats.items():
        if key != "population_history":
            print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
