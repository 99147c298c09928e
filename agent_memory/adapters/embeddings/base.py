from abc import ABC, abstractmethod


class AbstractEmbedder(ABC):
	"""Interface for text embedding providers."""

	#: Whether vector similarity reflects meaning. Non-semantic embedders only
	#: guarantee that identical text maps to identical vectors.
	is_semantic: bool = True

	@property
	@abstractmethod
	def dimension(self) -> int:
		"""Length of every vector returned by :meth:`embed`."""
		...

	@abstractmethod
	async def embed(self, text: str) -> list[float]:
		"""Turn text into a fixed-length vector.

		Args:
			text: Free-form input text.

		Returns:
			list[float]: Vector of length :attr:`dimension`.

		Raises:
			EmbeddingAppError: If the provider call fails or returns a malformed vector.
		"""
		...

	async def close(self) -> None:
		"""Release client resources (no-op by default)."""
