"""Database models for conversation checkpoints.

The thread_checkpoints table holds the complete ordered message history of
each conversation thread, so multi-turn conversations survive restarts.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


class ThreadCheckpoint(Base):
    """Persisted conversation state of one thread.

    ``messages`` stores the serialized message list (see
    hr_agent.agents.messages.dump_messages):
    [
        {"kind": "human", "role": "human", "content": "..."},
        {"kind": "assistant_tool_calls", "role": "assistant", "tool_calls": [...]},
        {"kind": "tool_result", "role": "tool", "call_id": "...", "content": "..."},
        ...
    ]

    Attributes:
        thread_id: Conversation thread identifier
        messages: JSON array with the full ordered message history
        message_count: Number of messages in the history
        created_at: Thread creation timestamp
        updated_at: Last save timestamp (auto-updated)
    """

    __tablename__ = "thread_checkpoints"

    thread_id = Column(
        String,
        primary_key=True,
        doc="Conversation thread identifier"
    )
    messages = Column(
        JSON,
        nullable=False,
        default=list,
        doc="Ordered message history"
    )
    message_count = Column(
        Integer,
        nullable=False,
        default=0,
        doc="Number of messages in the history"
    )
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        doc="Thread creation time"
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        doc="Last save time"
    )

    __table_args__ = (
        Index('idx_thread_checkpoints_updated', 'updated_at'),
    )

    def __repr__(self) -> str:
        return f"<ThreadCheckpoint(thread_id={self.thread_id}, messages={self.message_count})>"


def init_checkpoint_tables(engine: Engine) -> None:
    """Create the checkpoint tables if they do not exist.

    Idempotent and safe to run multiple times.

    Raises:
        SQLAlchemyError: If database connection or table creation fails
    """
    logger.info("Initializing checkpoint tables")
    Base.metadata.create_all(engine)
    logger.info("Checkpoint tables initialized successfully")
