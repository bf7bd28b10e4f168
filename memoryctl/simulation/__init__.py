"""Local parallel simulation engine."""

from memoryctl.simulation.engine import SimulationResult, run_simulation, simulate_iteration

__all__ = ["SimulationResult", "run_simulation", "simulate_iteration"]
