"""OpenAI-compatible chat client adapter."""

from typing import Any

from openai import AsyncOpenAI

from agent_memory.adapters.llm.base import AbstractLLMClient
from agent_memory.core.errors import LLMAppError


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions.

    Uses the official OpenAI Python SDK with async support. Any provider that
    speaks the same API (Groq, local gateways) works through ``base_url``.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: API key for authentication.
            model: Model name (e.g., "gpt-4o-mini", "llama-3.1-8b-instant").
            base_url: Optional custom base URL for the API.
            timeout_seconds: Timeout for requests in seconds.
            temperature: Default sampling temperature.
            max_tokens: Default reply length cap.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate_reply(
        self,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> str:
        """Generate a chat reply.

        Args:
            messages: Chat messages, system prompt first.
            **kwargs: Provider options (temperature, max_tokens, top_p, etc.).

        Returns:
            str: Stripped reply text.

        Raises:
            LLMAppError: If the API call fails or the reply is empty.
        """
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.pop("temperature", self.temperature),
            "max_tokens": kwargs.pop("max_tokens", self.max_tokens),
        }

        # Pass through additional parameters if provided
        allowed_params = {
            "top_p",
            "frequency_penalty",
            "presence_penalty",
            "seed",
        }
        for param in allowed_params:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
            content = response.choices[0].message.content
        except Exception as exc:
            raise LLMAppError(
                code="llm_provider_error",
                message=f"LLM API error: {str(exc)}",
                details={"model": self.model},
            ) from exc

        if content is None:
            raise LLMAppError(
                code="llm_empty_response",
                message="LLM returned empty response",
                details={"model": self.model},
            )

        return content.strip()

    async def close(self) -> None:
        await self.client.close()
