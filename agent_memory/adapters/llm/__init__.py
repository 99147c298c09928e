"""LLM adapter layer - abstracts over chat-completion providers."""

from agent_memory.adapters.llm.base import AbstractLLMClient
from agent_memory.adapters.llm.factory import create_llm_client
from agent_memory.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
