from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for chat-completion LLM clients."""

	model: str

	@abstractmethod
	async def generate_reply(
		self,
		messages: list[dict[str, str]],
		**kwargs: Any,
	) -> str:
		"""Generate the assistant's next message.

		Args:
			messages: Chat history as ``{"role": ..., "content": ...}`` dicts,
				system prompt first.
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			str: Reply text, stripped of surrounding whitespace.

		Raises:
			LLMAppError: If the provider call fails or returns no content.
		"""
		...

	async def close(self) -> None:
		"""Release client resources (no-op by default)."""
