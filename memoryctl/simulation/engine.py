"""Parallel simulation engine.

Each iteration i in [1, N] computes an independent scalar

    value(i) = i * 0.1 + sin(i) * cos(i) + sqrt(i)

The range is cut into disjoint chunks that run in a process pool; every chunk
writes only its own slice of the results list, so no locking is needed. The
results are reduced to a total and mean once all chunks finish.
"""

from __future__ import annotations

import json
import math
import os
from concurrent.futures import ProcessPoolExecutor
from dataclasses import asdict, dataclass
from typing import Any

from loguru import logger

from memoryctl.utils.exceptions import InvalidArgumentError

# Chunks per worker; more chunks even out uneven scheduling.
CHUNKS_PER_WORKER = 4


@dataclass(frozen=True)
class SimulationResult:
    name: str
    total: float
    average: float
    iterations: int

    def __post_init__(self) -> None:
        _check_iterations(self.iterations)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Single-line JSON record for downstream consumers."""
        return json.dumps(self.to_dict())


def _check_iterations(iterations: Any) -> None:
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise InvalidArgumentError(f"iterations must be an integer, got {iterations!r}", field="iterations")
    if iterations < 1:
        raise InvalidArgumentError(f"iterations must be >= 1, got {iterations}", field="iterations")


def _check_workers(max_workers: Any) -> None:
    if max_workers is None:
        return
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 0:
        raise InvalidArgumentError(f"max_workers must be an integer >= 0, got {max_workers!r}", field="max_workers")


def simulate_iteration(index: int) -> float:
    x = float(index)
    return index * 0.1 + math.sin(x) * math.cos(x) + math.sqrt(x)


def _compute_chunk(bounds: tuple[int, int]) -> list[float]:
    start, stop = bounds
    return [simulate_iteration(i) for i in range(start, stop)]


def chunk_bounds(iterations: int, workers: int) -> list[tuple[int, int]]:
    """Split [1, iterations] into half-open (start, stop) ranges covering every index once."""
    count = max(1, min(iterations, workers * CHUNKS_PER_WORKER))
    size = math.ceil(iterations / count)
    return [(start, min(start + size, iterations + 1)) for start in range(1, iterations + 1, size)]


def run_simulation(
    name: str,
    iterations: int,
    *,
    max_workers: int | None = None,
    ordered: bool = False,
) -> SimulationResult:
    """
    Run `iterations` independent steps and aggregate them.

    Args:
        name: Label echoed in the result.
        iterations: Number of steps, must be >= 1.
        max_workers: Process count; None or 0 uses every CPU.
        ordered: Compute in-process as a sequential fold (bit-exact across runs).
    """
    _check_iterations(iterations)
    _check_workers(max_workers)
    logger.info("Running simulation {} with {} iterations", name, iterations)

    if ordered:
        total = 0.0
        for i in range(1, iterations + 1):
            total += simulate_iteration(i)
    else:
        workers = max_workers or os.cpu_count() or 1
        bounds = chunk_bounds(iterations, workers)
        results = [0.0] * iterations
        with ProcessPoolExecutor(max_workers=min(workers, len(bounds))) as pool:
            for (start, stop), values in zip(bounds, pool.map(_compute_chunk, bounds)):
                results[start - 1 : stop - 1] = values
        total = sum(results)

    result = SimulationResult(name=name, total=total, average=total / iterations, iterations=iterations)
    logger.info("Simulation {} completed: total={} average={}", name, result.total, result.average)
    return result
