"""Assembly of the swapping agent's tool set."""

from typing import Any

from onchain_agent.bridge.types import CallableTool
from onchain_agent.tools.context import ToolContext
from onchain_agent.tools.encyclopedia import AskEncyclopediaArgs, ask_encyclopedia
from onchain_agent.tools.swapping import SwapTokensArgs, swap_tokens


def build_swapping_tools(context: ToolContext) -> dict[str, CallableTool]:
    """Build the callable tools bound to a session context."""

    async def run_swap(arguments: dict[str, Any]) -> Any:
        return await swap_tokens(SwapTokensArgs.model_validate(arguments), context)

    async def run_encyclopedia(arguments: dict[str, Any]) -> Any:
        return await ask_encyclopedia(
            AskEncyclopediaArgs.model_validate(arguments), context
        )

    return {
        "swapTokens": CallableTool(
            name="swapTokens",
            description="Swap or convert tokens.",
            parameters=SwapTokensArgs,
            invoke=run_swap,
        ),
        "askEncyclopedia": CallableTool(
            name="askEncyclopedia",
            description=(
                "Ask questions about Camelot DEX to get expert information "
                "about the protocol."
            ),
            parameters=AskEncyclopediaArgs,
            invoke=run_encyclopedia,
        ),
    }
