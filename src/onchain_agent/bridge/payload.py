"""Parsing of remote tool responses."""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def _field(result: Any, *names: str) -> Any:
    for name in names:
        if isinstance(result, dict) and name in result:
            return result[name]
        if hasattr(result, name):
            return getattr(result, name)
    return None


def response_text(result: Any) -> str:
    """Join all text content items of a remote tool response."""
    texts = []
    for item in _field(result, "content") or []:
        item_type = _field(item, "type")
        text = _field(item, "text")
        if item_type == "text" and isinstance(text, str):
            texts.append(text)
    return "\n".join(texts)


def parse_tool_response_payload(result: Any) -> Any:
    """Extract the data carried by a remote tool response.

    Structured content wins; otherwise the first text item is decoded as
    JSON, falling back to the joined text.

    Args:
        result: A CallToolResult or its dict form

    Returns:
        The decoded payload, or None if the response carries nothing
    """
    structured = _field(result, "structuredContent", "structured_content")
    if structured is not None:
        return structured

    for item in _field(result, "content") or []:
        text = _field(item, "text")
        if _field(item, "type") == "text" and isinstance(text, str):
            try:
                return json.loads(text)
            except json.JSONDecodeError:
                logger.debug("Tool response text is not JSON, returning raw text")
                return response_text(result)

    return None
