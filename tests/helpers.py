"""Shared test helpers: scripted chat models and fake vector indexes."""

from __future__ import annotations

import itertools
import time
from typing import Any

from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage, BaseMessage
from pydantic import Field

SYSTEM_MESSAGE = "You are helpful HR Chatbot Agent."


class ScriptedChatModel(GenericFakeChatModel):
    """Fake chat model that replays scripted replies and records every prompt."""

    prompts: list[list[BaseMessage]] = Field(default_factory=list)
    bound_tools: list[str] = Field(default_factory=list)
    delay: float = 0.0

    def bind_tools(self, tools, **kwargs):
        self.bound_tools = [tool.name for tool in tools]
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.prompts.append(list(messages))
        if self.delay:
            time.sleep(self.delay)
        return super()._generate(messages, stop=stop, run_manager=run_manager, **kwargs)


class FailingChatModel(ScriptedChatModel):
    """Fake chat model whose every call fails."""

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.prompts.append(list(messages))
        raise RuntimeError("model backend unavailable")


def tool_call_reply(
    query: str,
    n: int | None = None,
    call_id: str = "call-1",
    name: str = "employee_lookup",
    content: str = "",
) -> AIMessage:
    """Build a model reply requesting a single tool call."""
    args: dict[str, Any] = {"query": query}
    if n is not None:
        args["n"] = n
    return AIMessage(content=content, tool_calls=[{"id": call_id, "name": name, "args": args}])


def scripted_model(*replies: AIMessage | str, delay: float = 0.0) -> ScriptedChatModel:
    return ScriptedChatModel(messages=iter(replies), delay=delay)


def always_tool_calling_model() -> ScriptedChatModel:
    """Model that requests employee_lookup on every turn."""
    replies = (
        tool_call_reply("engineers", call_id=f"call-{i}")
        for i in itertools.count()
    )
    return ScriptedChatModel(messages=replies)


def make_hits(count: int) -> list[tuple[dict[str, Any], float]]:
    """Build ``count`` search hits with strictly descending scores."""
    return [
        (
            {
                "page_content": f"employee_id: E{i:03d}\njob_title: Engineer",
                "metadata": {"employee_id": f"E{i:03d}", "job_title": "Engineer"},
            },
            round(0.95 - i * 0.05, 2),
        )
        for i in range(count)
    ]


class FakeVectorIndex:
    """Vector index returning canned hits and recording its calls."""

    def __init__(self, hits: list[tuple[dict[str, Any], float]]):
        self.hits = hits
        self.calls: list[tuple[list[float], str, int]] = []

    def search(self, vector: list[float], field: str, k: int):
        self.calls.append((vector, field, k))
        return self.hits[:k]


class FailingVectorIndex:
    """Vector index whose every search fails."""

    def __init__(self):
        self.calls = 0

    def search(self, vector: list[float], field: str, k: int):
        self.calls += 1
        raise ConnectionError("vector index unavailable")
