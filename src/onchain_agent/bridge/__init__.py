"""Protocol bridge between remote MCP tool servers and local callables."""

from onchain_agent.bridge.aggregator import ToolAggregator, resolve_endpoint
from onchain_agent.bridge.client import McpBridge
from onchain_agent.bridge.payload import parse_tool_response_payload, response_text
from onchain_agent.bridge.schema import convert_input_schema
from onchain_agent.bridge.types import (
    CallableTool,
    ErrorDetail,
    RemoteToolDescriptor,
    ToolOutcome,
)

__all__ = [
    "CallableTool",
    "ErrorDetail",
    "McpBridge",
    "RemoteToolDescriptor",
    "ToolAggregator",
    "ToolOutcome",
    "convert_input_schema",
    "parse_tool_response_payload",
    "resolve_endpoint",
    "response_text",
]
