"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resume_studio.clients.llm_client import LLMClient, LLMResponse
from resume_studio.models.knowledge import KnowledgeRecord
from resume_studio.store.knowledge_store import KnowledgeStore

HEADER = "# Test Person\n\n| email | phone |\n|---|---|\n| a@b.c | 123 |\n\n"


@pytest.fixture
def header() -> str:
    return HEADER


@pytest.fixture
def sample_knowledge() -> KnowledgeRecord:
    return KnowledgeRecord(
        experiences="5 years at Acme as engineer",
        education="",
        skills="Go, SQL",
        job_descriptions=["Backend engineer, distributed systems"],
    )


@pytest.fixture
def knowledge_store(tmp_path) -> KnowledgeStore:
    return KnowledgeStore(db_path=tmp_path / "knowledge.db", max_job_descriptions=3)


@pytest.fixture
def filled_store(knowledge_store, sample_knowledge) -> KnowledgeStore:
    knowledge_store.save(**sample_knowledge.model_dump())
    return knowledge_store


@pytest.fixture
def sample_resume_reply() -> str:
    return """Here is your tailored resume:

## Summary
Backend engineer with 5 years of experience.

## Experience
### Engineer at Acme
- Built distributed services in Go

## Skills
Go, SQL
"""


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.complete = AsyncMock(
        return_value=LLMResponse(text="Sure, happy to help.", input_tokens=100, output_tokens=50)
    )
    return client
