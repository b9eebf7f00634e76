"""
Simulation configuration and the random-generation policy.

All tunable constants of the simulator live here: the runtime knobs
(quantum, context-switch cost), the fixed I/O block duration, and the ranges
used when new tasks are generated or when a task's I/O countdown is re-rolled.
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple


# Half-open ranges: [low, high).
IntRange = Tuple[int, int]


def _check_range(name: str, value: IntRange) -> None:
    low, high = value
    if low < 0 or high <= low:
        raise ValueError(f"{name} must be a non-empty range [low, high) with low >= 0. Got: {value}")


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable configuration for a simulation run.

    Attributes:
        quantum:              Time slice shown to the player (not enforced).
        context_switch_cost:  Ticks charged to global time on every dispatch.
        io_block_duration:    Ticks a task stays blocked once its I/O starts.
        remaining_time_range: Range of total CPU work for generated tasks.
        io_countdown_range:   Range of CPU ticks before a task blocks for I/O.
        tick_interval_ms:     Cadence of the periodic driver in the GUI.
    """

    quantum: int = 5
    context_switch_cost: int = 1
    io_block_duration: int = 10
    remaining_time_range: IntRange = (10, 25)
    io_countdown_range: IntRange = (3, 11)
    tick_interval_ms: int = 1000

    def __post_init__(self) -> None:
        validate_quantum(self.quantum)
        validate_context_switch_cost(self.context_switch_cost)
        if self.io_block_duration <= 0:
            raise ValueError(f"io_block_duration must be positive. Got: {self.io_block_duration}")
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive. Got: {self.tick_interval_ms}")
        _check_range("remaining_time_range", self.remaining_time_range)
        _check_range("io_countdown_range", self.io_countdown_range)
        if self.remaining_time_range[0] == 0:
            raise ValueError("remaining_time_range must start at 1 or more")
        if self.io_countdown_range[0] == 0:
            raise ValueError("io_countdown_range must start at 1 or more")


def validate_quantum(quantum: int) -> int:
    """Return ``quantum`` if it is a positive integer, else raise ValueError."""
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise ValueError(f"Time quantum must be a positive integer. Got: {quantum!r}")
    return quantum


def validate_context_switch_cost(cost: int) -> int:
    """Return ``cost`` if it is a non-negative integer, else raise ValueError."""
    if isinstance(cost, bool) or not isinstance(cost, int) or cost < 0:
        raise ValueError(f"Context switch cost must be a non-negative integer. Got: {cost!r}")
    return cost


class RandomPolicy:
    """
    Single source of randomness for the simulator.

    Every random draw (new task attributes, I/O countdown re-rolls) goes
    through one instance, so a seeded policy makes a whole run reproducible.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, seed: Optional[int] = None) -> None:
        self.config = config or SimulationConfig()
        self._rng = random.Random(seed)

    def remaining_time(self) -> int:
        return self._rng.randrange(*self.config.remaining_time_range)

    def io_countdown(self) -> int:
        return self._rng.randrange(*self.config.io_countdown_range)

    def priority_level(self) -> int:
        """Uniform draw over the three priority levels (1 = low .. 3 = high)."""
        return self._rng.randint(1, 3)
