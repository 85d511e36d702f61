"""Types shared by the protocol bridge and the reasoning engine."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    error: str
    message: str


class ToolOutcome(BaseModel):
    """Uniform result envelope for a bridged remote call.

    Failures are data, not exceptions: the reasoning loop reads them as
    ordinary tool content.
    """

    status: Literal["completed", "error"]
    result: Any = None

    @classmethod
    def completed(cls, result: Any) -> "ToolOutcome":
        return cls(status="completed", result=result)

    @classmethod
    def failure(cls, error: str, message: str) -> "ToolOutcome":
        return cls(status="error", result=ErrorDetail(error=error, message=message))


@dataclass
class RemoteToolDescriptor:
    """A tool as declared by a remote server's catalog."""

    name: str
    description: str = ""
    input_schema: dict[str, Any] | None = None

    @staticmethod
    def from_mcp_tool(tool: Any) -> "RemoteToolDescriptor":
        return RemoteToolDescriptor(
            name=tool.name,
            description=tool.description or "",
            input_schema=tool.inputSchema,
        )


@dataclass
class CallableTool:
    """A schema-validated function the reasoning engine may invoke.

    Attributes:
        name: Name exposed to the model
        description: Description exposed to the model
        parameters: Pydantic model validating the call arguments
        invoke: Coroutine function receiving validated arguments
    """

    name: str
    description: str
    parameters: type[BaseModel]
    invoke: Callable[[dict[str, Any]], Awaitable[Any]] = field(repr=False)

    def renamed(self, name: str) -> "CallableTool":
        """Return a copy exposed under another name."""
        return CallableTool(
            name=name,
            description=self.description,
            parameters=self.parameters,
            invoke=self.invoke,
        )

    def to_ollama_schema(self) -> dict[str, Any]:
        """Convert to the Ollama function-calling format."""
        schema = self.parameters.model_json_schema()
        schema.pop("title", None)
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": schema,
            },
        }
