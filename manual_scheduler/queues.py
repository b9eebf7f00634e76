"""
Queue manager: moves tasks between the ready queue, the running slot, the
blocked set and the terminated set.

Commands whose preconditions do not hold are ignored and leave the state
untouched; each returns ``True`` only when it changed something.
"""

import logging
from typing import List

from manual_scheduler.state import (
    FEEDBACK_INTERRUPTED,
    SimulationState,
    feedback_executing,
)
from manual_scheduler.tasks import Task


logger = logging.getLogger(__name__)


def add_task(state: SimulationState, task: Task) -> None:
    """Append a newly created ready task to the back of the ready queue."""
    task.mark_ready()
    state.ready_queue.append(task)
    state.tasks_created += 1
    state.log(f"Task {task.id} created (work {task.remaining_time}, {task.priority.label} priority)")
    logger.debug("Task %s added to ready queue", task.id)


def dispatch(state: SimulationState, task_id: str) -> bool:
    """
    Move a ready task onto the CPU, paying the context switch cost.

    Concept:
        - Only allowed while the running slot is empty.
        - The switch consumes ``context_switch_cost`` ticks of global time.
          During those ticks every other ready task keeps waiting and every
          blocked task keeps elapsing, so their counters are charged too.
          Blocked I/O timers do not move during a switch.

    Args:
        state:   Simulation state to mutate.
        task_id: Identifier of a task currently in the ready queue.

    Returns:
        ``True`` if the task was dispatched, ``False`` if ignored.
    """
    if state.running_task is not None:
        logger.debug("Dispatch of %s ignored: CPU busy with %s", task_id, state.running_task.id)
        return False
    task = state.find_ready(task_id)
    if task is None:
        logger.debug("Dispatch of %s ignored: not in ready queue", task_id)
        return False

    state.ready_queue.remove(task)
    cost = state.context_switch_cost
    state.global_time += cost
    state.context_switch_time += cost

    for other in state.ready_queue:
        other.waiting_time += cost
        other.execution_time += cost
    for blocked in state.blocked_tasks:
        blocked.execution_time += cost

    task.mark_running()
    state.running_task = task
    state.is_executing = True
    state.is_paused = False
    state.feedback = feedback_executing(task.id)
    state.log(f"Task {task.id} dispatched (context switch {cost})")
    logger.debug("Task %s dispatched at t=%d", task.id, state.global_time)
    return True


def interrupt(state: SimulationState) -> bool:
    """Send the running task back to the end of the ready queue."""
    task = state.running_task
    if task is None:
        logger.debug("Interrupt ignored: CPU is empty")
        return False

    state.running_task = None
    task.mark_ready()
    state.ready_queue.append(task)
    state.is_paused = True
    state.is_executing = False
    state.feedback = FEEDBACK_INTERRUPTED
    state.log(f"Task {task.id} interrupted -> Ready")
    logger.debug("Task %s interrupted at t=%d", task.id, state.global_time)
    return True


def move_completed_io(state: SimulationState) -> List[Task]:
    """
    Move blocked tasks whose I/O timer has run out back to the ready queue.

    Each returning task gets a fresh I/O countdown for its next run.

    Returns:
        The tasks that were moved, in blocked-set order.
    """
    completed = [task for task in state.blocked_tasks if task.io_timer == 0]
    if not completed:
        return []

    state.blocked_tasks = [task for task in state.blocked_tasks if task.io_timer != 0]
    for task in completed:
        task.io_countdown = state.policy.io_countdown()
        task.mark_ready()
        state.ready_queue.append(task)
        state.log(f"Task {task.id} I/O complete -> Ready")
        logger.debug("Task %s finished I/O, next countdown %d", task.id, task.io_countdown)
    return completed
