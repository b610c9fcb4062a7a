"""Conversation message types.

Messages are an exhaustive tagged union discriminated by ``kind``:

- Human: the user's question
- AssistantText: a model reply without tool calls (terminates a run)
- AssistantWithToolCalls: a model reply requesting one or more tool calls
- ToolResult: the output of one tool call, linked by ``call_id``

These are the types persisted in checkpoints. LangChain message objects are
only used at the language-model boundary (see to_langchain/from_langchain).
"""

import uuid
from typing import Annotated, Any, Iterable, Literal, Union

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, ToolMessage
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# Text, or provider-specific structured content blocks
Content = Union[str, list[Union[str, dict[str, Any]]]]


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the model."""

    model_config = ConfigDict(frozen=True)

    call_id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class Human(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["human"] = "human"
    role: Literal["human"] = "human"
    content: str


class AssistantText(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["assistant_text"] = "assistant_text"
    role: Literal["assistant"] = "assistant"
    content: Content


class AssistantWithToolCalls(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["assistant_tool_calls"] = "assistant_tool_calls"
    role: Literal["assistant"] = "assistant"
    content: Content = ""
    tool_calls: list[ToolCallRequest] = Field(min_length=1)


class ToolResult(BaseModel):
    """Output of one tool call. ``content`` is the JSON payload returned by the tool."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_result"] = "tool_result"
    role: Literal["tool"] = "tool"
    call_id: str
    name: str | None = None
    content: str


Message = Annotated[
    Union[Human, AssistantText, AssistantWithToolCalls, ToolResult],
    Field(discriminator="kind"),
]

_MESSAGE_LIST = TypeAdapter(list[Message])


def dump_messages(messages: Iterable[Message]) -> list[dict[str, Any]]:
    """Serialize messages to JSON-compatible dicts, preserving order."""
    return _MESSAGE_LIST.dump_python(list(messages), mode="json")


def load_messages(data: list[dict[str, Any]]) -> list[Message]:
    """Rebuild messages from dump_messages() output.

    Raises:
        pydantic.ValidationError: If an entry is not a valid message
    """
    return _MESSAGE_LIST.validate_python(data)


def message_text(message: Message) -> str:
    """Return the plain text of a message, joining text blocks of structured content."""
    content = message.content
    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def to_langchain(message: Message) -> BaseMessage:
    """Convert a stored message into the LangChain message sent to the model."""
    if isinstance(message, Human):
        return HumanMessage(content=message.content)
    if isinstance(message, AssistantText):
        return AIMessage(content=message.content)
    if isinstance(message, AssistantWithToolCalls):
        return AIMessage(
            content=message.content,
            tool_calls=[
                {"id": call.call_id, "name": call.name, "args": dict(call.arguments)}
                for call in message.tool_calls
            ]
        )
    if isinstance(message, ToolResult):
        return ToolMessage(content=message.content, tool_call_id=message.call_id, name=message.name)
    raise TypeError(f"Unsupported message type: {type(message).__name__}")


def from_langchain(message: BaseMessage) -> Message:
    """Convert a model reply into a stored message.

    An AIMessage with a non-empty ``tool_calls`` list becomes
    AssistantWithToolCalls; any other AIMessage becomes AssistantText. Tool
    calls without an id get a generated one so results can be linked back.
    """
    if not isinstance(message, AIMessage):
        raise TypeError(f"Expected an AIMessage from the model, got {type(message).__name__}")

    if message.tool_calls:
        return AssistantWithToolCalls(
            content=message.content,
            tool_calls=[
                ToolCallRequest(
                    call_id=call.get("id") or f"call_{uuid.uuid4().hex}",
                    name=call["name"],
                    arguments=call.get("args") or {}
                )
                for call in message.tool_calls
            ]
        )
    return AssistantText(content=message.content)
