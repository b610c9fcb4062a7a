"""Shared test fixtures and configuration."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from employee_retrieval import EmployeeLookup
from hr_agent.agents.agent_step import AgentConfig
from hr_agent.agents.graph import GraphEngine
from hr_agent.services import InMemoryCheckpointStore
from hr_agent_config import get_settings
from tests.helpers import SYSTEM_MESSAGE

FIXED_TIME = datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch):
    """Set minimal required environment variables for testing."""
    monkeypatch.setenv("POSTGRES_PASSWORD", "test_pass")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def embeddings():
    """Deterministic 8-dimensional fake embeddings."""
    return DeterministicFakeEmbedding(size=8)


@pytest.fixture
def checkpoint_store():
    return InMemoryCheckpointStore()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def make_engine(embeddings, checkpoint_store, fixed_clock):
    """Factory building a GraphEngine around a model and a vector index."""

    def _make(model, index, recursion_limit: int = 15, store=None) -> GraphEngine:
        lookup = EmployeeLookup(embeddings=embeddings, index=index)
        config = AgentConfig(
            system_message=SYSTEM_MESSAGE,
            tools=(lookup.as_tool(),),
            recursion_limit=recursion_limit,
        )
        return GraphEngine(model=model, config=config, store=store or checkpoint_store, clock=fixed_clock)

    return _make


@pytest.fixture
def sample_employees():
    """Sample employee records."""
    return [
        {
            "employee_id": "E001",
            "first_name": "Alice",
            "last_name": "Nguyen",
            "job_details": {"job_title": "Software Engineer", "department": "Engineering", "hire_date": "2021-03-01"},
            "skills": ["Python", "Kubernetes"],
        },
        {
            "employee_id": "E002",
            "first_name": "Bob",
            "last_name": "Martin",
            "job_details": {"job_title": "HR Specialist", "department": "Human Resources", "hire_date": "2018-07-15"},
            "skills": ["Recruiting"],
        },
        {
            "employee_id": "E003",
            "first_name": "Carol",
            "last_name": "Diaz",
            "job_details": {"job_title": "Data Engineer", "department": "Engineering", "hire_date": "2022-11-20"},
            "skills": ["SQL", "Spark"],
        },
    ]
