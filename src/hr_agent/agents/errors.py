"""Errors raised by the agent loop.

Only RetrievalFailure is recovered (inside employee_lookup, where it becomes
an error payload); every other error propagates to the caller of
GraphEngine.run(). Nothing is retried.
"""

from employee_retrieval import RetrievalFailure


class AgentError(Exception):
    """Base class for agent loop failures."""


class ModelInvocationError(AgentError):
    """The language-model call failed."""


class UnknownToolError(AgentError):
    """The model requested a tool that is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool requested: {tool_name}")
        self.tool_name = tool_name


class RecursionLimitExceeded(AgentError):
    """The AGENT/TOOLS alternation count exceeded the configured limit."""

    def __init__(self, limit: int):
        super().__init__(
            f"Recursion limit of {limit} agent/tool alternations reached "
            f"without a final answer"
        )
        self.limit = limit


__all__ = [
    "AgentError",
    "ModelInvocationError",
    "RecursionLimitExceeded",
    "RetrievalFailure",
    "UnknownToolError",
]
