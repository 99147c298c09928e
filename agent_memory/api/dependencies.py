"""FastAPI dependency providers backed by the application's service container."""

from __future__ import annotations

from fastapi import Request

from agent_memory.adapters.rate_limit.base import AbstractRateLimiter
from agent_memory.core.container import ServiceContainer
from agent_memory.services.breeding_service import ChildRegistry
from agent_memory.services.chat_service import ChatService
from agent_memory.services.memory_service import MemoryStore


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    return get_container(request).rate_limiter


def get_memory_store(request: Request) -> MemoryStore:
    return get_container(request).memory_store


def get_chat_service(request: Request) -> ChatService:
    return get_container(request).chat_service


def get_child_registry(request: Request) -> ChildRegistry:
    return get_container(request).child_registry
