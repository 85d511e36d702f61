"""Model selection from an ordered list of candidates."""

import logging
from typing import Awaitable, Callable

from onchain_agent.errors import ModelSelectionError
from onchain_agent.ollama.client import OllamaClient

logger = logging.getLogger(__name__)

ModelCheck = Callable[[str], Awaitable[bool]]


def tool_capability_check(client: OllamaClient) -> ModelCheck:
    """Build a check that accepts models which exist and support tool calls."""

    async def check(model_name: str) -> bool:
        info = await client.get_model_info(model_name)
        if info is None:
            return False
        logger.info(
            f"Model {info.name}: family={info.family}, parameters={info.parameter_size}, "
            f"context={info.context_length}, capabilities={info.capabilities}"
        )
        return "tools" in info.capabilities

    return check


async def select_model(candidates: list[str], check: ModelCheck) -> str:
    """Return the first candidate that passes the check.

    Args:
        candidates: Model names in order of preference
        check: Async predicate deciding whether a model is usable

    Returns:
        The selected model name

    Raises:
        ModelSelectionError: If no candidate passes
    """
    for model_name in candidates:
        logger.info(f"Attempting to use model: {model_name}")
        try:
            if await check(model_name):
                logger.info(f"Selected model: {model_name}")
                return model_name
            logger.warning(f"Model {model_name} is unavailable or lacks tool support")
        except Exception as e:
            logger.warning(f"Check failed for model {model_name}: {e}")

    raise ModelSelectionError(
        f"Failed to select any model from candidates: {', '.join(candidates) or '(none)'}"
    )
