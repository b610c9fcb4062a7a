"""Tool execution for the agent loop."""

import json
import logging
from typing import Sequence

from langchain_core.tools import BaseTool
from pydantic import ValidationError

from .errors import UnknownToolError
from .messages import AssistantWithToolCalls, ToolCallRequest, ToolResult

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Runs the tool calls requested by an assistant message.

    Calls run sequentially in request order and produce exactly one
    ToolResult per request, in the same order.

    Args:
        tools: Tools that can be resolved by name
    """

    def __init__(self, tools: Sequence[BaseTool]):
        self.tools_by_name = {tool.name: tool for tool in tools}

    def execute(self, message: AssistantWithToolCalls) -> list[ToolResult]:
        """Execute every tool call of ``message``.

        Args:
            message: Assistant message carrying the tool-call requests

        Returns:
            One ToolResult per request, in request order

        Raises:
            UnknownToolError: If a requested tool is not registered
        """
        results = []
        for request in message.tool_calls:
            results.append(self._execute_one(request))
        return results

    def _execute_one(self, request: ToolCallRequest) -> ToolResult:
        tool = self.tools_by_name.get(request.name)
        if tool is None:
            logger.error(f"Tool not found: {request.name}")
            raise UnknownToolError(request.name)

        logger.info(f"Executing tool: {request.name} (call_id={request.call_id})")
        logger.debug(f"Tool args: {request.arguments}")

        try:
            output = tool.invoke(dict(request.arguments))
        except ValidationError as e:
            # Reported in-band, same shape as a retrieval failure
            logger.warning(f"Invalid arguments for {request.name}: {e}")
            output = [{"error": f"Invalid arguments for {request.name}: {e.errors(include_url=False)}"}]

        content = output if isinstance(output, str) else json.dumps(output, default=str)

        logger.info(f"Tool result ({request.name}): {content[:200]}")

        return ToolResult(call_id=request.call_id, name=request.name, content=content)
