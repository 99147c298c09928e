"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It points APP_ENV at a testing environment (no .env file is loaded) and sets
the provider env vars settings need at import time.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

# Set default env vars that all tests might need
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4o-mini")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("EMBEDDING_PROVIDER", "hashing")
os.environ.setdefault("VECTOR_STORE_PROVIDER", "memory")

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from agent_memory.adapters.embeddings.hashing import HashingEmbedder
from agent_memory.adapters.llm.base import AbstractLLMClient
from agent_memory.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from agent_memory.adapters.vector_store.in_memory import InMemoryVectorStore
from agent_memory.core.app_factory import create_app
from agent_memory.core.container import ServiceContainer, build_container
from agent_memory.services.breeding_service import ChildRegistry

TEST_MODEL = "test-model"
TEST_REPLY = "Hello! I remember you like hiking."


@pytest.fixture
def fake_llm() -> Mock:
    """LLM client double returning a fixed reply."""
    llm = Mock(spec=AbstractLLMClient)
    llm.model = TEST_MODEL
    llm.generate_reply = AsyncMock(return_value=TEST_REPLY)
    llm.close = AsyncMock()
    return llm


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def rate_limiter() -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(limit=10, window_seconds=60)


@pytest.fixture
def container(tmp_path, fake_llm, vector_store, rate_limiter) -> ServiceContainer:
    """Service graph with in-process backends and a mocked LLM."""
    return build_container(
        rate_limiter=rate_limiter,
        vector_store=vector_store,
        embedder=HashingEmbedder(dimension=64),
        llm=fake_llm,
        child_registry=ChildRegistry(tmp_path / "children.json"),
    )


@pytest.fixture
def client(container: ServiceContainer) -> TestClient:
    return TestClient(create_app(container))
