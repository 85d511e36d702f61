"""Conversion of remote JSON parameter schemas to pydantic models.

The translation is lossy on purpose: any unusual schema must still produce
a usable model so discovery never fails because of it.
"""

import keyword
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, create_model

_TYPE_MAP: dict[str, Any] = {
    "string": str,
    "number": float,
    "boolean": bool,
}


class EmptyParameters(BaseModel):
    """Parameters of a tool that takes no arguments."""

    model_config = ConfigDict(extra="ignore")


def _is_plain_field_name(key: str) -> bool:
    # Names pydantic reserves are kept through an alias instead
    return (
        key.isidentifier()
        and not keyword.iskeyword(key)
        and not key.startswith(("_", "model_"))
        and not hasattr(BaseModel, key)
    )


def _model_name(tool_name: str) -> str:
    cleaned = "".join(ch for ch in tool_name.title() if ch.isalnum())
    return f"{cleaned or 'Tool'}Arguments"


def convert_input_schema(schema: Any, tool_name: str = "tool") -> type[BaseModel]:
    """Convert a remote tool's input schema into a pydantic model.

    Object schemas map property by property (string, number and boolean are
    typed, anything else accepts any value). Properties listed in
    ``required``, or all properties when ``required`` is absent, must be
    present. Non-object or missing schemas map to an empty parameter model.

    Args:
        schema: The remote JSON schema (or an existing pydantic model)
        tool_name: Used to name the generated model

    Returns:
        A pydantic model class validating call arguments
    """
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return schema

    if not isinstance(schema, dict):
        return EmptyParameters

    properties = schema.get("properties")
    if schema.get("type") != "object" or not isinstance(properties, dict):
        return EmptyParameters

    required = schema.get("required")
    required_names = set(required) if isinstance(required, list) else set(properties)

    fields: dict[str, Any] = {}
    for index, (key, prop_schema) in enumerate(properties.items()):
        prop_type = prop_schema.get("type") if isinstance(prop_schema, dict) else None
        annotation = _TYPE_MAP.get(prop_type, Any) if isinstance(prop_type, str) else Any
        description = (
            prop_schema.get("description") if isinstance(prop_schema, dict) else None
        )

        is_required = key in required_names
        if not is_required:
            annotation = annotation | None if annotation is not Any else Any
        default = ... if is_required else None

        if _is_plain_field_name(key):
            fields[key] = (annotation, Field(default, description=description))
        else:
            fields[f"field_{index}"] = (
                annotation,
                Field(default, alias=key, description=description),
            )

    return create_model(
        _model_name(tool_name),
        __config__=ConfigDict(extra="ignore", populate_by_name=True),
        **fields,
    )
