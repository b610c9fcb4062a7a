"""Reasoning step of the agent loop.

Sends the fixed system instructions plus the full conversation history to the
tool-bound chat model and returns its reply.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from langchain_core.tools import BaseTool

from .errors import ModelInvocationError
from .messages import Message, from_langchain, to_langchain

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = (
    "You are a helpful AI assistant, collaborating with other assistants. "
    "Use the provided tools to progress towards answering the question. "
    "If you are unable to fully answer, that's OK, another assistant with "
    "different tools will help where you left off. Execute what you can to "
    "make progress. If you or any of the other assistants have the final "
    "answer or deliverable, prefix your response with FINAL ANSWER so the "
    "team knows to stop. You have access to the following tools: {tool_names}.\n"
    "{system_message}\n"
    "Current time: {time}."
)

DEFAULT_RECURSION_LIMIT = 15


@dataclass(frozen=True)
class AgentConfig:
    """Fixed configuration of one agent: role description, tools and loop bound.

    Attributes:
        system_message: Role description injected into the system prompt
        tools: Tools bound to the model and resolvable by the tool node
        recursion_limit: Maximum AGENT/TOOLS alternations per run
    """

    system_message: str
    tools: tuple[BaseTool, ...]
    recursion_limit: int = DEFAULT_RECURSION_LIMIT

    def __post_init__(self):
        if self.recursion_limit < 1:
            raise ValueError(f"recursion_limit must be at least 1, got {self.recursion_limit}")

        names = [tool.name for tool in self.tools]
        if len(names) != len(set(names)):
            raise ValueError(f"Tool names must be unique, got {names}")

    @property
    def tool_names(self) -> list[str]:
        return [tool.name for tool in self.tools]


class AgentStep:
    """Calls the language model with the conversation so far.

    The history is sent exactly as stored: no reordering, no truncation. The
    reply is returned as-is; whether it requests tools is the model's decision.

    Args:
        model: Chat model supporting tool binding
        config: Agent configuration
        clock: Source of the timestamp shown to the model (UTC now by default)
    """

    def __init__(
        self,
        model: BaseChatModel,
        config: AgentConfig,
        clock: Callable[[], datetime] | None = None
    ):
        self.config = config
        self.model = model.bind_tools(list(config.tools))
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", SYSTEM_PROMPT_TEMPLATE),
            MessagesPlaceholder(variable_name="messages"),
        ])

    def build_prompt(self, messages: Sequence[Message]) -> list[BaseMessage]:
        """Render the system prompt followed by the full message history."""
        return self.prompt.format_messages(
            tool_names=", ".join(self.config.tool_names),
            system_message=self.config.system_message,
            time=self.clock().isoformat(),
            messages=[to_langchain(message) for message in messages]
        )

    def invoke(self, messages: Sequence[Message]) -> Message:
        """Run one reasoning step.

        Args:
            messages: Full conversation history in stored order

        Returns:
            The model reply (AssistantText or AssistantWithToolCalls)

        Raises:
            ModelInvocationError: If the model call fails
        """
        prompt = self.build_prompt(messages)

        logger.info(f"Invoking model with {len(messages)} history messages")

        try:
            reply = self.model.invoke(prompt)
        except Exception as e:
            logger.error(f"Model invocation failed: {e}", exc_info=True)
            raise ModelInvocationError(f"Language model call failed: {e}") from e

        return from_langchain(reply)
