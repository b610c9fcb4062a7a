"""LangGraph agent workflow construction and execution.

The graph alternates between a reasoning step and a tool step:

    START → agent → (tools → agent)* → END

The conversation of each thread is loaded from a checkpoint store before a run
and saved again after every agent or tool step, so a conversation survives
process restarts and can be continued with the same thread_id.
"""

import logging
import operator
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Callable, TypedDict

from langchain_core.language_models import BaseChatModel
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI
from langgraph.errors import GraphRecursionError
from langgraph.graph import END, START, StateGraph

from employee_retrieval import EmployeeLookup, QdrantVectorIndex, build_embeddings
from hr_agent_config import Settings, get_settings

from ..services.checkpoint_store import CheckpointStore, create_checkpoint_store
from .agent_step import AgentConfig, AgentStep
from .errors import RecursionLimitExceeded, UnknownToolError
from .messages import AssistantWithToolCalls, Human, Message, message_text
from .routing import Route, decide
from .tool_executor import ToolExecutor

logger = logging.getLogger(__name__)


class ConversationState(TypedDict):
    """Graph state of one run.

    Attributes:
        messages: Full conversation history; nodes append, never replace
        alternations: Number of tool steps executed in this run
        recursion_limit: Maximum tool steps allowed in this run
    """

    messages: Annotated[list[Message], operator.add]
    alternations: Annotated[int, operator.add]
    recursion_limit: int


# ========== HELPER FUNCTIONS ==========


def build_chat_model(settings: Settings) -> BaseChatModel:
    """Get environment-aware chat model.

    Returns Ollama (dev) or OpenAI (prod) based on settings. Both support
    tool calling.
    """
    if settings.llm.is_local:
        logger.info("Using Ollama for LLM")
        return ChatOllama(
            base_url=settings.llm.ollama_base_url,
            model=settings.llm.chat_model_name,
            temperature=settings.agent.temperature
        )

    logger.info("Using OpenAI for LLM")
    return ChatOpenAI(
        api_key=settings.llm.openai_api_key,
        model=settings.llm.chat_model_name,
        temperature=settings.agent.temperature
    )


# ========== ENGINE ==========


@dataclass
class _ThreadLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    # Runs holding or waiting for the lock
    users: int = 0


class GraphEngine:
    """Runs the agent loop for one conversation turn at a time.

    Runs on the same thread_id are serialized within this process. Two
    processes sharing a checkpoint database are not coordinated; a save that
    would shrink the stored history of a thread is rejected by the store.

    Args:
        model: Chat model supporting tool binding
        config: Agent configuration (system message, tools, recursion limit)
        store: Checkpoint store for conversation histories
        clock: Optional timestamp source for the system prompt

    Example:
        >>> engine = build_graph_engine()
        >>> engine.run("List engineers hired after 2020", thread_id="t1")
        'FINAL ANSWER: ...'
    """

    def __init__(
        self,
        model: BaseChatModel,
        config: AgentConfig,
        store: CheckpointStore,
        clock: Callable[[], datetime] | None = None
    ):
        self.config = config
        self.store = store
        self.agent_step = AgentStep(model, config, clock=clock)
        self.tool_executor = ToolExecutor(config.tools)
        self._locks: dict[str, _ThreadLock] = {}
        self._locks_guard = threading.Lock()
        self.graph = self._build_graph()

    # ========== NODE FUNCTIONS ==========

    def _agent_node(self, state: ConversationState) -> dict[str, Any]:
        reply = self.agent_step.invoke(state["messages"])
        return {"messages": [reply]}

    def _tools_node(self, state: ConversationState) -> dict[str, Any]:
        last_message = state["messages"][-1]
        if not isinstance(last_message, AssistantWithToolCalls):
            raise TypeError(f"Tool step reached without tool calls: {type(last_message).__name__}")

        results = self.tool_executor.execute(last_message)
        return {"messages": results, "alternations": 1}

    # ========== CONDITIONAL EDGE ==========

    def _route(self, state: ConversationState) -> str:
        """Decide the next node, enforcing the recursion limit and tool registry.

        Raising here fails the agent step, so an assistant message whose tool
        calls exceed the limit or name an unregistered tool is never saved.
        """
        last_message = state["messages"][-1]
        route = decide(last_message)

        if route is Route.TOOLS:
            if state["alternations"] >= state["recursion_limit"]:
                logger.error(
                    f"Recursion limit reached after {state['alternations']} alternations"
                )
                raise RecursionLimitExceeded(state["recursion_limit"])

            for request in last_message.tool_calls:
                if request.name not in self.tool_executor.tools_by_name:
                    logger.error(f"Model requested unknown tool: {request.name}")
                    raise UnknownToolError(request.name)

        logger.info(f"Routing to {route.value}")
        return route.value

    # ========== GRAPH CONSTRUCTION ==========

    def _build_graph(self):
        """Build and compile the agent workflow graph."""
        logger.info("Building agent graph")

        workflow = StateGraph(ConversationState)

        workflow.add_node("agent", self._agent_node)
        workflow.add_node("tools", self._tools_node)

        workflow.add_edge(START, "agent")
        workflow.add_conditional_edges(
            "agent",
            self._route,
            {
                Route.TOOLS.value: "tools",
                Route.END.value: END
            }
        )
        workflow.add_edge("tools", "agent")

        graph = workflow.compile()

        logger.info("Agent graph compiled successfully")

        return graph

    @contextmanager
    def _thread_lock(self, thread_id: str):
        """Hold the lock of ``thread_id``; the entry is dropped once no run uses it."""
        with self._locks_guard:
            entry = self._locks.get(thread_id)
            if entry is None:
                entry = self._locks[thread_id] = _ThreadLock()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[thread_id]

    def run(self, query: str, thread_id: str, recursion_limit: int | None = None) -> str:
        """Answer ``query`` within the conversation ``thread_id``.

        Args:
            query: User question
            thread_id: Conversation identifier; a new one starts an empty history
            recursion_limit: Maximum agent/tool alternations (defaults to config)

        Returns:
            Text of the final assistant reply

        Raises:
            ValueError: If query or thread_id is empty, or the limit is < 1
            ModelInvocationError: If the language-model call fails
            UnknownToolError: If the model requests an unregistered tool
            RecursionLimitExceeded: If no final answer is reached within the limit
        """
        if not query or not query.strip():
            raise ValueError("Query cannot be empty")

        if not thread_id or not thread_id.strip():
            raise ValueError("thread_id cannot be empty")

        limit = self.config.recursion_limit if recursion_limit is None else recursion_limit
        if limit < 1:
            raise ValueError(f"recursion_limit must be at least 1, got {limit}")

        with self._thread_lock(thread_id):
            messages = self.store.load(thread_id)
            messages.append(Human(content=query))

            logger.info(
                f"Running agent for thread {thread_id}: "
                f"history={len(messages) - 1}, query={query[:50]!r}"
            )

            initial_state = {
                "messages": list(messages),
                "alternations": 0,
                "recursion_limit": limit
            }

            try:
                # Each graph step is agent or tools; leave room for 2 * limit + 1 of them
                for update in self.graph.stream(
                    initial_state,
                    config={"recursion_limit": 2 * limit + 3},
                    stream_mode="updates"
                ):
                    for node, delta in update.items():
                        messages.extend(delta["messages"])
                        self.store.save(thread_id, messages)
                        logger.debug(f"Checkpoint saved after {node} step ({len(messages)} messages)")
            except GraphRecursionError as e:
                raise RecursionLimitExceeded(limit) from e

        answer = message_text(messages[-1])

        logger.info(f"Agent finished for thread {thread_id}: {len(messages)} messages")

        return answer


def build_graph_engine(settings: Settings | None = None) -> GraphEngine:
    """Wire the production agent: Qdrant-backed employee_lookup, chat model and checkpoints."""
    settings = settings or get_settings()

    lookup = EmployeeLookup(
        embeddings=build_embeddings(settings),
        index=QdrantVectorIndex.from_settings(settings),
        text_key=settings.qdrant.text_key
    )

    config = AgentConfig(
        system_message=settings.agent.system_message,
        tools=(lookup.as_tool(),),
        recursion_limit=settings.agent.recursion_limit
    )

    return GraphEngine(
        model=build_chat_model(settings),
        config=config,
        store=create_checkpoint_store(settings)
    )
