"""Task model and task-state disposition."""

from onchain_agent.tasks.state_machine import TaskDisposition, dispose
from onchain_agent.tasks.types import (
    TERMINAL_STATES,
    Artifact,
    DataPart,
    Task,
    TaskMessage,
    TaskState,
    TaskStatus,
    TextPart,
    task_from_tool_result,
)

__all__ = [
    "Artifact",
    "DataPart",
    "TERMINAL_STATES",
    "Task",
    "TaskDisposition",
    "TaskMessage",
    "TaskState",
    "TaskStatus",
    "TextPart",
    "dispose",
    "task_from_tool_result",
]
