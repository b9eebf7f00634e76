"""
Tick engine: advances the global clock one unit at a time.

There are three ways to spend a unit of time, one per CPU situation:

- ``tick``                     the CPU runs the task in the running slot;
- ``advance_idle_tick``        the CPU is idle while blocked tasks do I/O;
- ``advance_fully_idle_tick``  nothing is left but terminated tasks.

Each function checks its own preconditions and does nothing (returning
``False``) when they do not hold.
"""

import logging

from manual_scheduler.queues import move_completed_io
from manual_scheduler.state import (
    FEEDBACK_CPU_IDLE,
    FEEDBACK_DECISION_REQUIRED,
    FEEDBACK_WAITING_FOR_IO,
    SimulationState,
)


logger = logging.getLogger(__name__)


def _release_cpu(state: SimulationState) -> None:
    """
    Clear the running slot after the running task left the CPU.

    The simulator pauses for a decision when there is something to dispatch.
    With only blocked tasks left it stays live so idle time keeps flowing
    until their I/O completes.
    """
    state.running_task = None
    state.is_executing = False

    if state.ready_queue:
        state.is_paused = True
        state.feedback = FEEDBACK_DECISION_REQUIRED
    elif state.blocked_tasks:
        state.is_paused = False
        state.feedback = FEEDBACK_WAITING_FOR_IO
    else:
        state.is_paused = True
        state.feedback = FEEDBACK_CPU_IDLE


def _elapse_blocked(state: SimulationState, count_execution: bool) -> None:
    for task in state.blocked_tasks:
        if count_execution:
            task.execution_time += 1
        if task.status.io_timer > 0:
            task.status.io_timer -= 1


def tick(state: SimulationState) -> bool:
    """
    Execute one unit of CPU work for the running task.

    Steps:
        1. The running task loses one unit of work and of I/O countdown and
           gains one unit of execution and quantum usage.
        2. Every ready task waits one more unit.
        3. Every blocked task elapses one unit and its I/O timer counts down.
        4. Blocked tasks whose timer reached zero return to ready.
        5. The running task terminates if its work is done, otherwise blocks
           if its I/O countdown is exhausted, otherwise keeps running.
        6. Global time and CPU busy time both advance by one.

    Returns:
        ``True`` if a tick was executed, ``False`` if ignored.
    """
    task = state.running_task
    if task is None or not state.is_executing:
        logger.debug("Tick ignored: no task executing")
        return False

    task.remaining_time -= 1
    task.io_countdown -= 1
    task.execution_time += 1
    task.status.quantum_used += 1

    for other in state.ready_queue:
        other.waiting_time += 1
        other.execution_time += 1

    _elapse_blocked(state, count_execution=True)
    move_completed_io(state)

    if task.remaining_time <= 0:
        task.mark_terminated()
        state.terminated_tasks.append(task)
        state.log(f"Task {task.id} terminated")
        logger.debug("Task %s terminated at t=%d", task.id, state.global_time + 1)
        _release_cpu(state)
    elif task.io_countdown <= 0:
        task.mark_blocked(state.config.io_block_duration)
        state.blocked_tasks.append(task)
        state.log(f"Task {task.id} blocked for I/O ({state.config.io_block_duration} ticks)")
        logger.debug("Task %s blocked at t=%d", task.id, state.global_time + 1)
        _release_cpu(state)

    state.global_time += 1
    state.cpu_execution_time += 1
    return True


def advance_idle_tick(state: SimulationState) -> bool:
    """
    Spend one unit of time with an idle CPU while blocked tasks do I/O.

    Only valid when the ready queue and the running slot are empty and at
    least one task is blocked. CPU busy time does not advance.

    Returns:
        ``True`` if time advanced, ``False`` if ignored.
    """
    if state.ready_queue or state.running_task is not None or not state.blocked_tasks:
        logger.debug("Idle tick ignored: CPU is not waiting on I/O")
        return False

    _elapse_blocked(state, count_execution=False)
    completed = move_completed_io(state)

    if completed:
        state.is_paused = True
        state.feedback = FEEDBACK_DECISION_REQUIRED
    else:
        state.is_paused = False
        state.feedback = FEEDBACK_WAITING_FOR_IO

    state.global_time += 1
    return True


def advance_fully_idle_tick(state: SimulationState) -> bool:
    """Let time pass when only terminated tasks remain."""
    if state.ready_queue or state.running_task is not None or state.blocked_tasks:
        logger.debug("Fully idle tick ignored: tasks still active")
        return False

    state.global_time += 1
    state.feedback = FEEDBACK_CPU_IDLE
    return True
