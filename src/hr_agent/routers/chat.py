"""Chat endpoint router for question answering.

This module provides the /chat endpoint that runs the agent loop for one
conversation turn and returns its final answer.
"""

import logging
from functools import lru_cache
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from ..agents.errors import ModelInvocationError, RecursionLimitExceeded
from ..agents.graph import GraphEngine, build_graph_engine
from ..models import ChatRequest, ChatResponse
from ..services import CheckpointConflictError

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def get_graph_engine() -> GraphEngine:
    """Build the agent engine once per process.

    The engine holds the per-thread locks, so all requests must share it.
    """
    return build_graph_engine()


@router.post("/chat", response_model=ChatResponse, status_code=status.HTTP_200_OK)
def chat(
    request: ChatRequest,
    engine: GraphEngine = Depends(get_graph_engine)
) -> ChatResponse:
    """Answer a user question within a conversation thread.

    Runs the agent loop: the model reasons over the conversation, calls
    employee_lookup as often as it needs, and stops at its final answer.
    The conversation is persisted under thread_id after every step.

    Args:
        request: Chat request containing user message and optional thread_id
        engine: Agent engine (injected)

    Returns:
        ChatResponse with the final answer and thread_id

    Raises:
        HTTPException 400: Invalid request (e.g., blank message)
        HTTPException 409: Conversation updated concurrently by another process
        HTTPException 422: No final answer within the recursion limit
        HTTPException 502: Language model call failed
        HTTPException 500: Internal processing error
    """
    logger.info(f"Chat request received: {request.message[:50]}...")

    # Generate or use provided thread ID
    thread_id = request.thread_id or str(uuid4())

    try:
        answer = engine.run(request.message, thread_id)

    except RecursionLimitExceeded as e:
        logger.warning(f"Agent did not finish for thread {thread_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    except ModelInvocationError as e:
        logger.error(f"Model call failed for thread {thread_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Language model call failed"
        )

    except CheckpointConflictError as e:
        logger.warning(f"Concurrent update of thread {thread_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Conversation was updated concurrently, retry the request"
        )

    except ValidationError as e:
        # Stored checkpoint does not parse
        logger.error(f"Corrupt checkpoint for thread {thread_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process chat request"
        )

    except ValueError as e:
        # Client error (invalid input)
        logger.warning(f"Invalid chat request: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    except Exception as e:
        # Server error
        logger.error(f"Chat processing failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process chat request"
        )

    logger.info(f"Chat completed for thread {thread_id}")

    return ChatResponse(response=answer, thread_id=thread_id)
