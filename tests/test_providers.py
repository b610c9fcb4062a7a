"""Tests for environment-aware model wiring."""

from langchain_ollama import ChatOllama, OllamaEmbeddings
from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from employee_retrieval import QdrantVectorIndex, build_embeddings
from hr_agent.agents.graph import build_chat_model, build_graph_engine
from hr_agent.services import InMemoryCheckpointStore
from hr_agent_config import get_settings


class TestDevelopment:
    def test_ollama_models(self):
        settings = get_settings()
        assert isinstance(build_chat_model(settings), ChatOllama)
        assert isinstance(build_embeddings(settings), OllamaEmbeddings)


class TestProduction:
    def test_openai_models(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        settings = get_settings()

        model = build_chat_model(settings)

        assert isinstance(model, ChatOpenAI)
        assert model.model_name == "gpt-4o-mini"
        assert isinstance(build_embeddings(settings), OpenAIEmbeddings)


def test_build_graph_engine(monkeypatch):
    """Wiring from settings, without contacting any service."""
    monkeypatch.setenv("CHECKPOINT_BACKEND", "memory")
    monkeypatch.setenv("AGENT_RECURSION_LIMIT", "7")

    engine = build_graph_engine()

    assert isinstance(engine.store, InMemoryCheckpointStore)
    assert engine.config.recursion_limit == 7
    assert engine.config.tool_names == ["employee_lookup"]
    assert set(engine.tool_executor.tools_by_name) == {"employee_lookup"}

    lookup_tool = engine.tool_executor.tools_by_name["employee_lookup"]
    index = lookup_tool.func.__self__.index
    assert isinstance(index, QdrantVectorIndex)
    assert index.collection_name == "employees"
