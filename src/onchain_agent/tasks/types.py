"""Task data model.

A Task is the unit-of-work result returned for every user turn. It is born
in its final state; nothing mutates it afterwards.
"""

import json
import logging
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class TaskState(str, Enum):
    SUBMITTED = "submitted"
    WORKING = "working"
    INPUT_REQUIRED = "input-required"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


TERMINAL_STATES = frozenset(
    {TaskState.COMPLETED.value, TaskState.FAILED.value, TaskState.CANCELED.value}
)


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class DataPart(BaseModel):
    type: Literal["data"] = "data"
    data: dict[str, Any]


Part = Annotated[TextPart | DataPart, Field(discriminator="type")]


class TaskMessage(BaseModel):
    role: str = "agent"
    parts: list[Part] = Field(default_factory=list)


class Artifact(BaseModel):
    name: str | None = None
    parts: list[Part] = Field(default_factory=list)


class TaskStatus(BaseModel):
    # Kept as a plain string so unrecognized states reach the state machine
    state: str
    message: TaskMessage | None = None


class Task(BaseModel):
    """A unit-of-work result.

    Attributes:
        id: Caller-supplied correlation key (the user's address)
        status: Current state and optional human-readable message
        artifacts: Optional structured outputs (e.g. a transaction plan)
    """

    id: str
    status: TaskStatus
    artifacts: list[Artifact] | None = None

    @classmethod
    def with_text(cls, task_id: str, state: TaskState | str, text: str) -> "Task":
        """Build a task whose status message is a single text part."""
        state_value = state.value if isinstance(state, TaskState) else state
        return cls(
            id=task_id,
            status=TaskStatus(
                state=state_value,
                message=TaskMessage(role="agent", parts=[TextPart(text=text)]),
            ),
        )

    @property
    def state(self) -> str:
        return self.status.state

    @property
    def text(self) -> str | None:
        """First text part of the status message, if any."""
        if self.status.message is None:
            return None
        for part in self.status.message.parts:
            if isinstance(part, TextPart):
                return part.text
        return None


def _as_task(payload: Any) -> Task | None:
    if isinstance(payload, Task):
        return payload
    if not isinstance(payload, dict) or not isinstance(payload.get("status"), dict):
        return None
    if "state" not in payload["status"]:
        return None
    try:
        return Task.model_validate(payload)
    except ValidationError as e:
        logger.debug(f"Payload looks like a task but failed validation: {e}")
        return None


def _remote_text(result: Any) -> str | None:
    """Join text content of a remote tool response."""
    if not isinstance(result, dict):
        return None
    texts = [
        item.get("text", "")
        for item in result.get("content") or []
        if isinstance(item, dict) and item.get("type") == "text"
    ]
    return "\n".join(texts) if texts else None


def task_from_tool_result(payload: Any, task_id: str) -> Task | None:
    """Coerce the payload of a tool-role message into a Task.

    Local tools return Task objects directly. Bridged remote tools return a
    ToolOutcome envelope: errors become failed tasks, successful responses
    are searched for a serialized task in their text content and otherwise
    wrapped as a completed task.

    Args:
        payload: The tool result as recorded in history
        task_id: Correlation id for synthesized tasks

    Returns:
        The candidate Task, or None if the payload is empty
    """
    if payload is None:
        return None

    task = _as_task(payload)
    if task is not None:
        return task

    if hasattr(payload, "model_dump"):
        payload = payload.model_dump(mode="json")

    if isinstance(payload, dict) and payload.get("status") == "error":
        detail = payload.get("result") or {}
        message = detail.get("message") if isinstance(detail, dict) else None
        error = detail.get("error") if isinstance(detail, dict) else None
        text = message or error or "Tool execution failed."
        if message and error and message != error:
            text = f"{message} ({error})"
        return Task.with_text(task_id, TaskState.FAILED, text)

    if isinstance(payload, dict) and payload.get("status") == "completed":
        result = payload.get("result")
        task = _as_task(result)
        if task is not None:
            return task
        text = _remote_text(result)
        if text is not None:
            try:
                task = _as_task(json.loads(text))
            except json.JSONDecodeError:
                task = None
            if task is not None:
                return task
            return Task.with_text(task_id, TaskState.COMPLETED, text)
        return Task.with_text(
            task_id, TaskState.COMPLETED, json.dumps(result, default=str)
        )

    if isinstance(payload, str):
        return Task.with_text(task_id, TaskState.COMPLETED, payload)

    return Task.with_text(
        task_id, TaskState.COMPLETED, json.dumps(payload, default=str)
    )
