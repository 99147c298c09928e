"""Factory pattern for creating LLM client instances."""

from agent_memory.adapters.llm.base import AbstractLLMClient
from agent_memory.adapters.llm.openai_client import OpenAIClient
from agent_memory.core.config import LLMSettings, settings
from agent_memory.core.errors import ValidationAppError


def create_llm_client(llm_settings: LLMSettings | None = None) -> AbstractLLMClient:
    """Factory function to instantiate LLM clients based on provider.

    Reads configuration from agent_memory.core.config.settings unless explicit
    settings are passed. Validates provider-specific requirements.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    cfg = llm_settings or settings.llm
    provider = cfg.provider.lower()

    # OpenAI and OpenAI-compatible endpoints
    if provider == "openai":
        if not cfg.api_key:
            raise ValidationAppError(
                code="llm_missing_api_key",
                message="OpenAI provider requires LLM_API_KEY environment variable",
            )
        return OpenAIClient(
            api_key=cfg.api_key,
            model=cfg.model,
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
            temperature=cfg.temperature,
            max_tokens=cfg.max_tokens,
        )

    raise ValidationAppError(
        code="llm_unknown_provider",
        message=(
            f"Unknown LLM provider: '{provider}'. Supported providers: openai"
        ),
    )
