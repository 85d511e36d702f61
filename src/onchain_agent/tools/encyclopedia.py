"""Protocol encyclopedia tool backed by local documentation files."""

import asyncio
import logging
from pathlib import Path

from pydantic import BaseModel, Field

from onchain_agent.tasks.types import Task, TaskState
from onchain_agent.tools.context import ToolContext

logger = logging.getLogger(__name__)

ENCYCLOPEDIA_PROMPT = """You are a Camelot DEX expert. Answer the user's question using only the documentation below. If the documentation does not contain the answer, say so. Never respond in markdown, always use plain text.

<documentation>
{documentation}
</documentation>"""


class AskEncyclopediaArgs(BaseModel):
    """Arguments of the askEncyclopedia tool."""

    question: str = Field(description="The question to ask about Camelot DEX.")


def load_documentation(docs_dir: Path) -> str:
    """Concatenate every markdown file in a directory.

    Unreadable files are logged and marked in the result.

    Args:
        docs_dir: Directory containing ``*.md`` files

    Returns:
        The combined documentation (empty if nothing could be loaded)
    """
    logger.info(f"Loading documentation from: {docs_dir}")
    if not docs_dir.is_dir():
        logger.warning(f"Documentation directory not found: {docs_dir}")
        return ""

    sections = []
    for file_path in sorted(docs_dir.glob("*.md")):
        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not read documentation file {file_path}: {e}")
            sections.append(f"--- Failed to load {file_path.name} ---")
            continue
        sections.append(f"--- Content from {file_path.name} ---\n\n{content}")
        logger.info(f"Successfully loaded {file_path.name}")

    combined = "\n\n".join(sections)
    if not combined.strip():
        logger.warning("Documentation context is empty after loading attempts")
    return combined


async def ask_encyclopedia(args: AskEncyclopediaArgs, context: ToolContext) -> Task:
    """Answer a protocol question from the loaded documentation."""
    task_id = context.user_address or "unknown-user"
    if not context.documentation.strip():
        return Task.with_text(
            task_id,
            TaskState.FAILED,
            "The Camelot documentation is not available right now.",
        )

    try:
        result = await asyncio.wait_for(
            context.ollama_client.chat(
                model=context.model,
                messages=[
                    {
                        "role": "system",
                        "content": ENCYCLOPEDIA_PROMPT.format(
                            documentation=context.documentation
                        ),
                    },
                    {"role": "user", "content": args.question},
                ],
            ),
            timeout=context.timeout,
        )
    except TimeoutError:
        logger.error(f"Encyclopedia model call timed out after {context.timeout}s")
        return Task.with_text(
            task_id,
            TaskState.FAILED,
            "Timed out while answering the question. Please try again later.",
        )
    except Exception as e:
        logger.error(f"Encyclopedia model call failed: {e}")
        return Task.with_text(
            task_id, TaskState.FAILED, f"Error answering question: {e}"
        )

    return Task.with_text(task_id, TaskState.COMPLETED, result.content)
