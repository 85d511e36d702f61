"""Token swap tool.

Resolves the requested tokens and chains against the capability table,
converts the amount to base units and asks the tool server for a swap
transaction plan. Signing and broadcasting stay with the user's wallet.
"""

import logging
from decimal import ROUND_DOWN, Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from onchain_agent.bridge.payload import parse_tool_response_payload
from onchain_agent.capabilities.types import TokenEntry
from onchain_agent.errors import UnknownTokenError
from onchain_agent.tasks.types import Artifact, DataPart, Task, TaskState
from onchain_agent.tools.chains import chain_name, resolve_chain_id
from onchain_agent.tools.context import ToolContext

logger = logging.getLogger(__name__)

REMOTE_SWAP_TOOL = "swapTokens"


class SwapTokensArgs(BaseModel):
    """Arguments of the swapTokens tool."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    from_token: str = Field(description="The symbol of the token to swap from.")
    to_token: str = Field(description="The symbol of the token to swap to.")
    amount: str = Field(description="The amount of the token to swap from.")
    from_chain: str | None = Field(
        default=None, description="Optional chain name for the source token."
    )
    to_chain: str | None = Field(
        default=None, description="Optional chain name for the destination token."
    )


def _chains_of(entries: list[TokenEntry]) -> str:
    return ", ".join(chain_name(entry.chain_id) for entry in entries)


def _select_entry(
    symbol: str,
    entries: list[TokenEntry],
    chain: str | None,
    preferred_chain_id: str | None,
    task_id: str,
) -> TokenEntry | Task:
    """Pick the chain deployment of a token, or return a task asking for one."""
    if chain:
        chain_id = resolve_chain_id(chain)
        matches = [entry for entry in entries if entry.chain_id == chain_id]
        if matches:
            return matches[0]
        return Task.with_text(
            task_id,
            TaskState.INPUT_REQUIRED,
            f"Token {symbol} is not supported on {chain}. "
            f"Available chains for {symbol}: {_chains_of(entries)}.",
        )

    if len(entries) == 1:
        return entries[0]

    if preferred_chain_id:
        for entry in entries:
            if entry.chain_id == preferred_chain_id:
                return entry

    return Task.with_text(
        task_id,
        TaskState.INPUT_REQUIRED,
        f"Which chain would you like to use for {symbol}? "
        f"Available chains: {_chains_of(entries)}.",
    )


def _to_base_units(amount: Decimal, decimals: int) -> int:
    return int(amount.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))


async def swap_tokens(args: SwapTokensArgs, context: ToolContext) -> Task:
    """Build a swap transaction plan for the current user.

    Raises:
        UnknownTokenError: If either symbol is not in the capability table
    """
    task_id = context.user_address or "unknown-user"
    if not context.user_address:
        return Task.with_text(task_id, TaskState.FAILED, "User address is required.")

    table = context.capabilities
    from_entries = table.lookup(args.from_token)
    if not from_entries:
        raise UnknownTokenError(args.from_token, table.available_symbols)
    to_entries = table.lookup(args.to_token)
    if not to_entries:
        raise UnknownTokenError(args.to_token, table.available_symbols)

    from_symbol = table.canonical_symbol(args.from_token) or args.from_token
    to_symbol = table.canonical_symbol(args.to_token) or args.to_token

    source = _select_entry(from_symbol, from_entries, args.from_chain, None, task_id)
    if isinstance(source, Task):
        return source
    destination = _select_entry(
        to_symbol, to_entries, args.to_chain, source.chain_id, task_id
    )
    if isinstance(destination, Task):
        return destination

    try:
        amount = Decimal(args.amount)
    except InvalidOperation:
        return Task.with_text(
            task_id, TaskState.FAILED, f"Invalid amount: {args.amount}."
        )
    if not amount.is_finite() or amount <= 0:
        return Task.with_text(
            task_id, TaskState.FAILED, f"Amount must be positive: {args.amount}."
        )
    base_units = _to_base_units(amount, source.decimals)
    if base_units <= 0:
        return Task.with_text(
            task_id, TaskState.FAILED, f"Amount {args.amount} is too small."
        )

    logger.info(
        f"Requesting swap of {amount} {from_symbol} on {chain_name(source.chain_id)} "
        f"to {to_symbol} on {chain_name(destination.chain_id)}"
    )
    outcome = await context.bridge.invoke(
        REMOTE_SWAP_TOOL,
        {
            "fromTokenUid": {"chainId": source.chain_id, "address": source.address},
            "toTokenUid": {
                "chainId": destination.chain_id,
                "address": destination.address,
            },
            "amount": str(base_units),
            "userAddress": context.user_address,
        },
    )

    if outcome.status == "error":
        error = outcome.result.error if outcome.result else "unknown error"
        return Task.with_text(task_id, TaskState.FAILED, f"Swap failed: {error}")

    plan = parse_tool_response_payload(outcome.result)
    task = Task.with_text(
        task_id,
        TaskState.COMPLETED,
        f"Transaction plan ready to swap {amount} {from_symbol} on "
        f"{chain_name(source.chain_id)} for {to_symbol} on "
        f"{chain_name(destination.chain_id)}. Please sign the transaction.",
    )
    task.artifacts = [
        Artifact(
            name="transaction-plan",
            parts=[DataPart(data=plan if isinstance(plan, dict) else {"plan": plan})],
        )
    ]
    return task
