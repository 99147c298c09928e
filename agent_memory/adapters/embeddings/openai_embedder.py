"""OpenAI embeddings adapter."""

from openai import AsyncOpenAI

from agent_memory.adapters.embeddings.base import AbstractEmbedder
from agent_memory.core.errors import EmbeddingAppError


class OpenAIEmbedder(AbstractEmbedder):
    """Semantic embeddings via the OpenAI embeddings endpoint.

    ``text-embedding-3-*`` models accept a ``dimensions`` argument, which keeps
    vectors the same length as the index (384 by default).
    """

    is_semantic = True

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimension: int = 384,
        base_url: str | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the async OpenAI client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Embedding model name.
            dimension: Requested vector length.
            base_url: Optional custom base URL for the API.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str) -> list[float]:
        """Embed ``text`` with the configured model.

        Raises:
            EmbeddingAppError: On API failure or a vector of unexpected length.
        """
        try:
            response = await self.client.embeddings.create(
                model=self.model,
                input=text,
                dimensions=self._dimension,
            )
            vector = list(response.data[0].embedding)
        except Exception as exc:
            raise EmbeddingAppError(
                code="embedding_provider_error",
                message=f"OpenAI embeddings error: {str(exc)}",
                details={"provider": "openai", "model": self.model},
            ) from exc

        if len(vector) != self._dimension:
            raise EmbeddingAppError(
                code="embedding_dimension_mismatch",
                message=(
                    f"Embedding has {len(vector)} dimensions, expected {self._dimension}"
                ),
                details={"provider": "openai", "model": self.model},
            )
        return vector

    async def close(self) -> None:
        await self.client.close()
