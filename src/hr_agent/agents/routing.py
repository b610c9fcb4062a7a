"""Routing after the agent step."""

from enum import Enum

from langgraph.graph import END

from .messages import AssistantText, AssistantWithToolCalls, Human, Message, ToolResult


class Route(str, Enum):
    """Next node after the agent step."""

    TOOLS = "tools"
    END = END


def decide(last_message: Message) -> Route:
    """Route to the tool node iff the last message requests tool calls.

    Args:
        last_message: Most recent message of the conversation

    Returns:
        Route.TOOLS for AssistantWithToolCalls, Route.END for any other message

    Raises:
        TypeError: If last_message is not a conversation message
    """
    if isinstance(last_message, AssistantWithToolCalls):
        return Route.TOOLS
    if isinstance(last_message, (AssistantText, Human, ToolResult)):
        return Route.END
    raise TypeError(f"Cannot route on {type(last_message).__name__}")
