"""Domain tools exposed to the model.

The swap tool resolves tokens through the capability table and asks the
tool server to build a transaction plan; the encyclopedia tool answers
protocol questions from local documentation.
"""

from onchain_agent.tools.context import ToolContext
from onchain_agent.tools.encyclopedia import ask_encyclopedia, load_documentation
from onchain_agent.tools.registry import build_swapping_tools
from onchain_agent.tools.swapping import swap_tokens

__all__ = [
    "ToolContext",
    "ask_encyclopedia",
    "build_swapping_tools",
    "load_documentation",
    "swap_tokens",
]
