"""Memory-augmented chat replies for agents.

One chat turn:
1. Look up the agent's memories most relevant to the message (best-effort)
2. Build a system prompt that lists them with their relevance
3. Ask the LLM for a reply; provider failures become a friendly fallback
4. Remember the user's message as a new memory (best-effort)
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from agent_memory.adapters.llm.base import AbstractLLMClient
from agent_memory.core.errors import LLMAppError, ValidationAppError
from agent_memory.core.logging import hash_identifier
from agent_memory.services.memory_service import MemoryRecord, MemoryStore

logger = logging.getLogger(__name__)

BASE_SYSTEM_PROMPT = (
    "You are a helpful AI agent that remembers previous conversations. "
    "Keep responses concise and friendly."
)

FALLBACK_REPLY = "I'm having a small technical hiccup. Could you try asking that again?"
RATE_LIMITED_REPLY = "I'm getting too many requests right now. Please try again in a moment!"

GREETINGS = (
    "Hello! How can I help you today?",
    "Hi there! What would you like to talk about?",
    "Hey! I'm here and ready to chat. What do you need?",
)

MIN_REPLY_CHARS = 3


@dataclass(frozen=True)
class ChatReply:
    """Result of one chat turn."""

    reply: str
    memories_used: int
    agent_id: str | None
    model: str
    fallback: bool = False


def format_memory_context(memories: list[MemoryRecord]) -> list[str]:
    """Render memories as prompt lines with their relevance as a percentage."""
    return [
        f"Memory {i}: {memory.text} (relevance: {memory.score * 100:.1f}%)"
        for i, memory in enumerate(memories, start=1)
    ]


def build_system_prompt(memory_lines: list[str]) -> str:
    """Build the system prompt, embedding memory lines when present."""
    if not memory_lines:
        return BASE_SYSTEM_PROMPT
    return (
        f"{BASE_SYSTEM_PROMPT}\n\n"
        "Here are relevant memories from previous conversations:\n"
        + "\n".join(memory_lines)
        + "\n\nUse these memories to provide personalized and context-aware responses."
    )


class ChatService:
    """Generate agent replies using the LLM and the agent's memories.

    Attributes:
        llm: Chat-completion client.
        memory_store: Store used for recall and for remembering messages.
    """

    def __init__(
        self,
        llm: AbstractLLMClient,
        memory_store: MemoryStore,
        *,
        memory_top_k: int = 3,
        remember: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        self.llm = llm
        self.memory_store = memory_store
        self.memory_top_k = memory_top_k
        self.remember = remember
        self._rng = rng or random.Random()

    async def _recall(self, agent_id: str | None, message: str) -> list[MemoryRecord]:
        if not agent_id or self.memory_top_k < 1:
            return []
        # MemoryStore.search already degrades to [] on backend failure
        return await self.memory_store.search(agent_id, message, self.memory_top_k)

    async def _generate(self, messages: list[dict[str, str]]) -> tuple[str, bool]:
        try:
            reply = await self.llm.generate_reply(messages)
        except LLMAppError as exc:
            logger.error(
                "chat.llm_failed",
                extra={"error_code": exc.code, "error_msg": exc.message},
            )
            text = exc.message.lower()
            if "rate limit" in text or "429" in text:
                return RATE_LIMITED_REPLY, True
            return FALLBACK_REPLY, True

        if len(reply) < MIN_REPLY_CHARS:
            return self._rng.choice(GREETINGS), False
        return reply, False

    async def reply(self, message: str, agent_id: str | None = None) -> ChatReply:
        """Answer ``message`` as the agent identified by ``agent_id``.

        Args:
            message: User message; length limits are enforced by the caller.
            agent_id: Agent whose memories are recalled and extended.

        Returns:
            ChatReply with the reply text and how many memories were used.

        Raises:
            ValidationAppError: If message is empty.
        """
        if not message or not message.strip():
            raise ValidationAppError(code="missing_message", message="message is required")

        memories = await self._recall(agent_id, message)
        system_prompt = build_system_prompt(format_memory_context(memories))

        reply, fallback = await self._generate(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ]
        )

        if agent_id and self.remember:
            await self.memory_store.store(agent_id, message, {"source": "chat"})

        logger.info(
            "chat.replied",
            extra={
                "agent_hash": hash_identifier(agent_id) if agent_id else None,
                "memories_used": len(memories),
                "fallback": fallback,
                "model": self.llm.model,
            },
        )
        return ChatReply(
            reply=reply,
            memories_used=len(memories),
            agent_id=agent_id,
            model=self.llm.model,
            fallback=fallback,
        )
