"""
Command/query surface of the manual scheduler.

``Simulator`` is the single owner of the simulation state. A front-end
drives it with commands (dispatch, interrupt, the three kinds of tick) and
reads it back through snapshots and metrics. All commands run to completion
before returning, so callers on one thread never observe a half-applied
transition.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional

from manual_scheduler import engine, queues
from manual_scheduler.config import (
    RandomPolicy,
    SimulationConfig,
    validate_context_switch_cost,
    validate_quantum,
)
from manual_scheduler.metrics import (
    Metrics,
    PriorityBreakdown,
    calculate_metrics,
    priority_wait_metrics,
)
from manual_scheduler.state import SimulationState, Snapshot
from manual_scheduler.tasks import STARTING_WORKLOAD, Task, TaskSeed, create_task


logger = logging.getLogger(__name__)


class Cadence(Enum):
    """Which periodic action applies to the current state."""

    RUN = "run"                # tick()
    IDLE_IO = "idle_io"        # advance_idle_tick()
    IDLE = "idle"              # advance_fully_idle_tick()
    WAIT = "wait"              # waiting for the player


class Simulator:
    """
    Manual single-CPU scheduler simulation.

    Args:
        config: Run configuration; defaults to ``SimulationConfig()``.
        seed:   Seed for the random policy (new tasks, I/O re-rolls).
        policy: Explicit random policy; overrides ``seed`` when given.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        seed: Optional[int] = None,
        policy: Optional[RandomPolicy] = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.policy = policy or RandomPolicy(self.config, seed=seed)
        self._state = SimulationState.fresh(self.config, self.policy)

    # ------------------------------------------------------------------#
    # Commands                                                          #
    # ------------------------------------------------------------------#

    def restart(self, workload: Iterable[TaskSeed] = STARTING_WORKLOAD) -> None:
        """Discard the current run and start over with ``workload`` in ready."""
        self._state = SimulationState.fresh(self.config, self.policy)
        for seed in workload:
            queues.add_task(self._state, seed.to_task())
        self._state.log("Simulation restarted")
        logger.info("Simulation restarted with %d tasks", self._state.tasks_created)

    def create_task(self) -> Task:
        """Add a randomly generated task to the ready queue."""
        task = create_task(f"T{self._state.tasks_created + 1}", self.policy)
        queues.add_task(self._state, task)
        return task

    def dispatch(self, task_id: str) -> bool:
        return queues.dispatch(self._state, task_id)

    def interrupt(self) -> bool:
        return queues.interrupt(self._state)

    def tick(self) -> bool:
        return engine.tick(self._state)

    def advance_idle_tick(self) -> bool:
        return engine.advance_idle_tick(self._state)

    def advance_fully_idle_tick(self) -> bool:
        return engine.advance_fully_idle_tick(self._state)

    def set_quantum(self, quantum: int) -> None:
        self._state.quantum = validate_quantum(quantum)
        logger.debug("Quantum set to %d", quantum)

    def set_context_switch_cost(self, cost: int) -> None:
        self._state.context_switch_cost = validate_context_switch_cost(cost)
        logger.debug("Context switch cost set to %d", cost)

    def configure(self, quantum: int, context_switch_cost: int) -> None:
        """Apply both runtime knobs, or neither if either value is invalid."""
        validate_quantum(quantum)
        validate_context_switch_cost(context_switch_cost)
        self.set_quantum(quantum)
        self.set_context_switch_cost(context_switch_cost)

    def set_executing(self, executing: bool) -> None:
        self._state.is_executing = bool(executing)

    def step(self) -> Cadence:
        """
        Run the periodic action that applies to the current state, if any.

        Returns:
            The cadence that was applied (``Cadence.WAIT`` when nothing ran).
        """
        cadence = self.cadence()
        if cadence is Cadence.RUN:
            self.tick()
        elif cadence is Cadence.IDLE_IO:
            self.advance_idle_tick()
        elif cadence is Cadence.IDLE:
            self.advance_fully_idle_tick()
        return cadence

    # ------------------------------------------------------------------#
    # Queries                                                           #
    # ------------------------------------------------------------------#

    def cadence(self) -> Cadence:
        """
        Decide which periodic action the driver should fire.

        The three conditions are mutually exclusive for any state.
        """
        state = self._state
        nothing_running = state.running_task is None
        # is_executing can be set by hand with an empty CPU; that is not a run.
        if state.is_executing and not state.is_paused and not nothing_running:
            return Cadence.RUN
        if not state.is_paused and nothing_running and not state.ready_queue and state.blocked_tasks:
            return Cadence.IDLE_IO
        if state.is_paused and nothing_running and not state.ready_queue and not state.blocked_tasks:
            return Cadence.IDLE
        return Cadence.WAIT

    def snapshot(self) -> Snapshot:
        return Snapshot.of(self._state)

    def metrics(self) -> Metrics:
        return calculate_metrics(self._state)

    def priority_wait_metrics(self) -> PriorityBreakdown:
        return priority_wait_metrics(self._state)

    def events(self) -> List[str]:
        """Recent events, newest first."""
        return list(self._state.events)

    @property
    def tasks_created(self) -> int:
        return self._state.tasks_created
