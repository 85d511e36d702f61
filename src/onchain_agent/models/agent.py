"""Pydantic models for the agent task endpoint."""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from onchain_agent.tasks.types import Task

_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


class AgentTaskRequest(BaseModel):
    """Request body for POST /api/v1/agent/tasks."""

    instruction: str = Field(
        ...,
        min_length=1,
        description=(
            "A natural-language swapping directive, e.g. 'Swap 1 ETH to USDC', "
            "or a question about Camelot DEX."
        ),
    )
    user_address: str = Field(
        ...,
        description="The user wallet address which is used to sign transactions.",
    )

    @field_validator("user_address")
    @classmethod
    def validate_address(cls, value: str) -> str:
        if not _ADDRESS_PATTERN.match(value):
            raise ValueError("Invalid user address provided.")
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "instruction": "swap 1 ETH to USDC on Ethereum",
                    "user_address": "0x" + "ab" * 20,
                }
            ]
        }
    )


class AgentTaskResponse(BaseModel):
    """Response body for POST /api/v1/agent/tasks."""

    task: Task = Field(description="The task produced by this turn")
    is_error: bool = Field(
        default=False, description="True when the turn failed with an error"
    )
