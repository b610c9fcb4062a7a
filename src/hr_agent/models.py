"""Request and response models for API endpoints.

This module defines Pydantic models for all API request and response payloads.

Examples:
    >>> request = ChatRequest(
    ...     message="List engineers hired after 2020",
    ...     thread_id="t1"
    ... )
    >>> response = ChatResponse(response="FINAL ANSWER: ...", thread_id="t1")
"""

from pydantic import BaseModel, Field

# Validation constants
MAX_MESSAGE_LENGTH = 2000
MIN_MESSAGE_LENGTH = 1


# ========== CHAT ENDPOINT MODELS ==========


class ChatRequest(BaseModel):
    """Request model for chat endpoint.

    Attributes:
        message: User question or message (1-2000 characters)
        thread_id: Optional conversation thread to continue
    """

    message: str = Field(
        ...,
        min_length=MIN_MESSAGE_LENGTH,
        max_length=MAX_MESSAGE_LENGTH,
        description="User question or message",
        examples=["List engineers hired after 2020"]
    )
    thread_id: str | None = Field(
        None,
        description="Conversation thread to continue (a new one is created if omitted)"
    )


class ChatResponse(BaseModel):
    """Response model for chat endpoint.

    Attributes:
        response: Final answer of the agent
        thread_id: Conversation thread the answer belongs to
    """

    response: str = Field(..., description="Agent answer")
    thread_id: str = Field(..., description="Conversation thread ID")
