"""Task-state disposition.

Each Task represents one outcome. The machine does not move tasks between
states; it decides what the caller receives and whether the conversation
history is discarded.
"""

import logging
from dataclasses import dataclass

from onchain_agent.tasks.types import TERMINAL_STATES, Task, TaskState

logger = logging.getLogger(__name__)

NON_TERMINAL_STATES = frozenset(
    {
        TaskState.INPUT_REQUIRED.value,
        TaskState.SUBMITTED.value,
        TaskState.WORKING.value,
        TaskState.UNKNOWN.value,
    }
)


@dataclass(frozen=True)
class TaskDisposition:
    """What to return for a turn and whether history resets."""

    task: Task
    reset_history: bool


def dispose(task: Task, fallback_id: str | None = None) -> TaskDisposition:
    """Classify a task produced by a tool.

    Terminal states reset the history. Non-terminal states keep it so the
    next turn continues the same unit of work. Any other state is replaced
    by a synthetic failed task, which is terminal like any other failure.

    Args:
        task: The candidate task
        fallback_id: Id used for the synthetic task when the state is invalid

    Returns:
        TaskDisposition for the orchestrator
    """
    state = task.status.state

    if state in TERMINAL_STATES:
        logger.info(f"Task finished with state {state}. Clearing conversation history.")
        return TaskDisposition(task=task, reset_history=True)

    if state in NON_TERMINAL_STATES:
        logger.info(f"Task is {state}; conversation history kept")
        return TaskDisposition(task=task, reset_history=False)

    logger.warning(f"Unexpected task state: {state}")
    failed = Task.with_text(
        fallback_id or task.id or "unknown-user",
        TaskState.FAILED,
        f"Agent encountered unexpected task state: {state}",
    )
    return TaskDisposition(task=failed, reset_history=True)
