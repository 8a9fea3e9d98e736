from typing import Any, AsyncIterator
from dataclasses import dataclass
from abc import abstractmethod, ABC


@dataclass
class StreamChunk:
    """Standardized streaming chunk from a chat-completion provider."""

    content: str | None = None
    usage: dict[str, Any] | None = None
    finish_reason: str | None = None


@dataclass
class Model(ABC):
    """
    Abstract base for chat-completion models.

    Subclasses implement arun_stream(); acomplete() joins the stream into text.
    """

    id: str
    name: str
    temperature: float = 0.7
    max_tokens: int = 1000
    api_key: str | None = None
    base_url: str | None = None
    provider: str = ""

    def __post_init__(self) -> None:
        if not (0.0 <= self.temperature <= 2.0):
            raise ValueError("temperature must be between 0.0 and 2.0")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")

    @abstractmethod
    async def arun_stream(self, messages: list[dict]) -> AsyncIterator[StreamChunk]:
        """Stream responses as standardized chunks."""

    async def acomplete(self, messages: list[dict]) -> str:
        parts: list[str] = []
        async for chunk in self.arun_stream(messages):
            if chunk.content:
                parts.append(chunk.content)
        return "".join(parts)

    async def close(self) -> None:
        """Close the model's underlying client connection."""
        if getattr(self, "client", None) is not None:
            await self.client.close()


__all__ = ["Model", "StreamChunk"]
