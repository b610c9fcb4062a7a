"""Tests for conversation checkpoint stores."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from hr_agent.agents.messages import (
    AssistantText,
    AssistantWithToolCalls,
    Human,
    ToolCallRequest,
    ToolResult,
)
from hr_agent.services import (
    CheckpointConflictError,
    InMemoryCheckpointStore,
    SqlCheckpointStore,
    create_checkpoint_store,
)
from hr_agent.services.models import ThreadCheckpoint, init_checkpoint_tables
from hr_agent_config import get_settings


def sqlite_store() -> SqlCheckpointStore:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    init_checkpoint_tables(engine)
    return SqlCheckpointStore(engine)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return InMemoryCheckpointStore()
    return sqlite_store()


@pytest.fixture
def conversation():
    return [
        Human(content="Who works in Engineering?"),
        AssistantWithToolCalls(tool_calls=[
            ToolCallRequest(call_id="call-1", name="employee_lookup", arguments={"query": "Engineering"})
        ]),
        ToolResult(call_id="call-1", name="employee_lookup", content='[{"document": {"page_content": "Alice"}, "score": 0.9}]'),
        AssistantText(content="FINAL ANSWER: Alice"),
    ]


class TestCheckpointStore:
    """Behaviour shared by every checkpoint backend."""

    def test_unknown_thread_loads_empty(self, store):
        assert store.load("missing") == []

    def test_roundtrip(self, store, conversation):
        store.save("t1", conversation)
        assert store.load("t1") == conversation

    def test_save_replaces_history(self, store, conversation):
        store.save("t1", conversation[:2])
        store.save("t1", conversation)
        assert store.load("t1") == conversation

    def test_threads_are_independent(self, store, conversation):
        store.save("t1", conversation)
        store.save("t2", conversation[:1])
        assert len(store.load("t1")) == 4
        assert len(store.load("t2")) == 1

    def test_loaded_history_is_a_copy(self, store, conversation):
        store.save("t1", conversation)
        loaded = store.load("t1")
        loaded.append(Human(content="not saved"))
        assert len(store.load("t1")) == 4

    def test_shrinking_history_rejected(self, store, conversation):
        store.save("t1", conversation)
        with pytest.raises(CheckpointConflictError):
            store.save("t1", conversation[:2])
        assert store.load("t1") == conversation

    @pytest.mark.parametrize("thread_id", ["", "   "])
    def test_blank_thread_id_rejected(self, store, conversation, thread_id):
        with pytest.raises(ValueError):
            store.save(thread_id, conversation)
        with pytest.raises(ValueError):
            store.load(thread_id)


class TestSqlCheckpointStore:
    def test_row_tracks_message_count(self, conversation):
        store = sqlite_store()
        store.save("t1", conversation)

        with store._get_session() as session:
            record = session.get(ThreadCheckpoint, "t1")
            assert record.message_count == 4
            assert record.messages[0] == {"kind": "human", "role": "human", "content": "Who works in Engineering?"}

    def test_init_tables_is_idempotent(self):
        engine = create_engine("sqlite://", poolclass=StaticPool)
        init_checkpoint_tables(engine)
        init_checkpoint_tables(engine)


class TestCreateCheckpointStore:
    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("CHECKPOINT_BACKEND", "memory")
        assert isinstance(create_checkpoint_store(get_settings()), InMemoryCheckpointStore)

    def test_postgres_backend(self, monkeypatch):
        monkeypatch.setenv("CHECKPOINT_BACKEND", "postgres")
        monkeypatch.setattr(SqlCheckpointStore, "from_settings", classmethod(lambda cls, settings: "sql-store"))
        assert create_checkpoint_store(get_settings()) == "sql-store"
