"""Checkpoint stores for conversation state.

A checkpoint store maps a thread_id to the complete ordered message history of
that conversation. ``save`` replaces the stored history atomically; ``load``
returns the last saved history, or an empty list for an unknown thread.
Histories only grow: saving a shorter history than the stored one is rejected.
"""

import json
import logging
import threading
from contextlib import contextmanager
from typing import Protocol, Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from hr_agent_config import Settings, get_settings

from ..agents.messages import Message, dump_messages, load_messages
from .models import ThreadCheckpoint, init_checkpoint_tables

logger = logging.getLogger(__name__)


class CheckpointStore(Protocol):
    """Durable keyed log of conversation histories."""

    def save(self, thread_id: str, messages: Sequence[Message]) -> None:
        ...

    def load(self, thread_id: str) -> list[Message]:
        ...


def _validate_thread_id(thread_id: str) -> None:
    if not thread_id or not thread_id.strip():
        raise ValueError("thread_id cannot be empty")


class CheckpointConflictError(Exception):
    """A save would replace a longer stored history with a shorter one."""


def _check_not_shrinking(thread_id: str, stored: int, new: int) -> None:
    if new < stored:
        raise CheckpointConflictError(
            f"Refusing to shrink checkpoint for thread {thread_id}: "
            f"{stored} stored messages, {new} given"
        )


class InMemoryCheckpointStore:
    """Process-local checkpoint store.

    Histories are kept as JSON snapshots, so callers never share message
    lists with the store. Not durable across restarts; meant for development
    and tests.
    """

    def __init__(self):
        self._snapshots: dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, thread_id: str, messages: Sequence[Message]) -> None:
        _validate_thread_id(thread_id)
        payload = dump_messages(messages)
        snapshot = json.dumps(payload)

        with self._lock:
            previous = self._snapshots.get(thread_id)
            if previous is not None:
                _check_not_shrinking(thread_id, len(json.loads(previous)), len(payload))
            self._snapshots[thread_id] = snapshot

        logger.debug(f"Saved {len(payload)} messages for thread {thread_id}")

    def load(self, thread_id: str) -> list[Message]:
        _validate_thread_id(thread_id)

        with self._lock:
            snapshot = self._snapshots.get(thread_id)

        if snapshot is None:
            logger.info(f"Thread {thread_id} not found, starting empty")
            return []

        return load_messages(json.loads(snapshot))


class SqlCheckpointStore:
    """SQLAlchemy-backed checkpoint store (PostgreSQL in production).

    Each save runs in a single transaction that locks the thread's row, so a
    concurrent load observes either the previous or the new history, never a
    partial one.

    Example:
        >>> store = SqlCheckpointStore.from_settings()
        >>> store.save("thread-1", [Human(content="Who leads HR?")])
        >>> store.load("thread-1")
        [Human(kind='human', role='human', content='Who leads HR?')]
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=self.engine)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SqlCheckpointStore":
        """Create a store on the configured PostgreSQL database, creating tables if needed."""
        settings = settings or get_settings()
        engine = create_engine(settings.database.connection_string)
        init_checkpoint_tables(engine)
        return cls(engine)

    @contextmanager
    def _get_session(self):
        """Context manager for database sessions.

        Commits on success, rolls back on error, and always closes the session.

        Yields:
            SQLAlchemy session
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database transaction failed: {e}", exc_info=True)
            raise
        finally:
            session.close()

    def save(self, thread_id: str, messages: Sequence[Message]) -> None:
        """Replace the stored history of ``thread_id``.

        Raises:
            ValueError: If thread_id is empty
            CheckpointConflictError: If the history would shrink
            SQLAlchemyError: If the database operation fails
        """
        _validate_thread_id(thread_id)
        payload = dump_messages(messages)

        with self._get_session() as session:
            record = session.get(ThreadCheckpoint, thread_id, with_for_update=True)

            if record is None:
                record = ThreadCheckpoint(thread_id=thread_id)
                session.add(record)
                logger.info(f"Created checkpoint for thread: {thread_id}")
            else:
                _check_not_shrinking(thread_id, record.message_count, len(payload))

            record.messages = payload
            record.message_count = len(payload)

        logger.debug(f"Saved {len(payload)} messages for thread {thread_id}")

    def load(self, thread_id: str) -> list[Message]:
        """Return the stored history of ``thread_id`` (empty if unknown).

        Raises:
            ValueError: If thread_id is empty
            SQLAlchemyError: If the database query fails
        """
        _validate_thread_id(thread_id)

        with self._get_session() as session:
            record = session.get(ThreadCheckpoint, thread_id)

            if record is None:
                logger.info(f"Thread {thread_id} not found, starting empty")
                return []

            logger.info(f"Loaded checkpoint for thread {thread_id}: messages_count={record.message_count}")
            return load_messages(record.messages)


def create_checkpoint_store(settings: Settings | None = None) -> CheckpointStore:
    """Build the checkpoint store selected by CHECKPOINT_BACKEND."""
    settings = settings or get_settings()

    if settings.checkpoint.backend == "memory":
        logger.warning("Using in-memory checkpoint store; conversations will not survive restarts")
        return InMemoryCheckpointStore()

    return SqlCheckpointStore.from_settings(settings)
