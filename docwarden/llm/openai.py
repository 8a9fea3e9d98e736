from typing import Any, AsyncIterator

from openai import (
    AsyncOpenAI,
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from docwarden.config.settings import settings
from docwarden.llm.base import Model, StreamChunk
from docwarden.utils.logging import get_logger
from docwarden.utils.retry import retry_async

logger = get_logger(__name__)


OPENAI_RETRYABLE = (
    APIConnectionError,
    RateLimitError,
    InternalServerError,
    APITimeoutError,
)


class OpenAIModel(Model):
    """Chat model served by any OpenAI-compatible endpoint."""

    def __init__(
        self,
        id: str,
        name: str,
        api_key: str | None = None,
        base_url: str | None = "https://api.openai.com/v1",
        temperature: float = 0.7,
        max_tokens: int = 1000,
        provider: str = "openai",
    ):
        super().__init__(
            id=id,
            name=name,
            api_key=api_key,
            base_url=base_url,
            temperature=temperature,
            max_tokens=max_tokens,
            provider=provider,
        )
        self.client = self._create_client()

    def _create_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)

    @retry_async(
        max_attempts=settings.generation_max_attempts, exceptions=OPENAI_RETRYABLE
    )
    async def _create_stream(self, params: dict[str, Any]) -> Any:
        return await self.client.chat.completions.create(**params)

    async def arun_stream(self, messages: list[dict]) -> AsyncIterator[StreamChunk]:
        """
        Call the chat-completions API and yield standardized chunks.

        Args:
            messages: OpenAI format message list
        """
        actual_model = self.id or self.name
        params = {
            "model": actual_model,
            "messages": messages,
            "temperature": self.temperature,
            "stream": True,
        }
        if self.max_tokens:
            params["max_tokens"] = self.max_tokens

        logger.info(
            "llm_request",
            provider=self.provider,
            model=actual_model,
            messages_count=len(messages),
            max_tokens=self.max_tokens,
        )

        try:
            stream = await self._create_stream(params)
        except Exception as e:
            logger.error(
                "llm_request_failed",
                provider=self.provider,
                model=actual_model,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        async for chunk in stream:
            stream_chunk = StreamChunk()

            if getattr(chunk, "usage", None):
                stream_chunk.usage = {
                    "input_tokens": getattr(chunk.usage, "prompt_tokens", None),
                    "output_tokens": getattr(chunk.usage, "completion_tokens", None),
                }

            if chunk.choices:
                choice = chunk.choices[0]
                if choice.delta.content:
                    stream_chunk.content = choice.delta.content
                if choice.finish_reason:
                    stream_chunk.finish_reason = choice.finish_reason

            if stream_chunk.content is not None or stream_chunk.usage is not None:
                yield stream_chunk


class GroqModel(OpenAIModel):
    """Groq chat model; credentials and endpoint default to global settings."""

    def __init__(
        self,
        id: str | None = None,
        name: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        model_name = id or settings.groq_model_name
        if api_key is None and settings.groq_api_key is not None:
            api_key = settings.groq_api_key.get_secret_value()
        super().__init__(
            id=model_name,
            name=name or model_name,
            api_key=api_key,
            base_url=base_url or settings.groq_base_url,
            temperature=(
                temperature if temperature is not None else settings.groq_temperature
            ),
            max_tokens=max_tokens or settings.groq_max_tokens,
            provider="groq",
        )


__all__ = ["OpenAIModel", "GroqModel", "OPENAI_RETRYABLE"]
