"""Agent task endpoint.

Every turn answers with a Task. Faults raised by the orchestrator are
reported as a failed Task rather than an HTTP error.
"""

import logging

from fastapi import APIRouter, Depends

from onchain_agent.agents import ConversationOrchestrator
from onchain_agent.dependencies import get_agent
from onchain_agent.models.agent import AgentTaskRequest, AgentTaskResponse
from onchain_agent.tasks.types import Task, TaskState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/agent", tags=["agent"])


@router.post("/tasks", response_model=AgentTaskResponse)
async def create_task(
    request_body: AgentTaskRequest,
    agent: ConversationOrchestrator = Depends(get_agent),
) -> AgentTaskResponse:
    """Send a natural-language instruction to the swapping agent.

    Args:
        request_body: Instruction and user address
        agent: Injected agent session

    Returns:
        AgentTaskResponse with the resulting task
    """
    logger.info(f"Processing instruction for {request_body.user_address}")
    try:
        task = await agent.process_user_input(
            request_body.instruction, request_body.user_address
        )
    except Exception as e:
        logger.error(f"Agent failed to process instruction: {e}")
        error_task = Task.with_text(
            request_body.user_address, TaskState.FAILED, f"Error: {e}"
        )
        return AgentTaskResponse(task=error_task, is_error=True)

    logger.info(f"Task state: {task.state}")
    return AgentTaskResponse(task=task)
