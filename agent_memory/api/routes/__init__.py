from __future__ import annotations

from agent_memory.api.routes.breeding import router as breeding_router
from agent_memory.api.routes.chat import router as chat_router
from agent_memory.api.routes.health import router as health_router
from agent_memory.api.routes.memories import router as memories_router

__all__ = ["breeding_router", "chat_router", "health_router", "memories_router"]
