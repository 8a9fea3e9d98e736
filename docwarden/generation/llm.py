"""
LLMContentGenerator - content generation backed by a chat model.
"""

from docwarden.config.settings import settings
from docwarden.generation.base import ContentGenerator, GenerationResult
from docwarden.generation.prompts import (
    SYSTEM_PROMPTS,
    build_user_prompt,
    parse_improved_document,
)
from docwarden.llm.base import Model
from docwarden.permission.capabilities import ActionType, parse_action
from docwarden.permission.exceptions import UpstreamGenerationError
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)


class LLMContentGenerator(ContentGenerator):
    """Prompts a chat model for summarize/analyze/improve/translate."""

    def __init__(self, model: Model) -> None:
        self._model = model

    async def generate(
        self,
        action_type: str,
        title: str,
        content: str,
        *,
        target_language: str | None = None,
    ) -> GenerationResult:
        action = parse_action(action_type)
        if action is None or action not in SYSTEM_PROMPTS:
            raise UpstreamGenerationError(f"Unknown action type: {action_type}")

        messages = [
            {"role": "system", "content": SYSTEM_PROMPTS[action]},
            {
                "role": "user",
                "content": build_user_prompt(
                    action,
                    title,
                    content,
                    target_language or settings.default_target_language,
                ),
            },
        ]

        try:
            text = await self._model.acomplete(messages)
        except Exception as e:
            logger.warning(
                "generation_provider_error",
                action_type=action.value,
                provider=self._model.provider,
                error=str(e),
            )
            raise UpstreamGenerationError(
                f"Failed to generate AI response: {e}"
            ) from e

        if not text.strip():
            raise UpstreamGenerationError("No response received from the model")

        if action == ActionType.IMPROVE_DOCUMENT:
            return GenerationResult(
                result="Document improvement suggestions generated",
                changes=parse_improved_document(title, text),
            )
        return GenerationResult(result=text.strip())

    async def close(self) -> None:
        await self._model.close()


__all__ = ["LLMContentGenerator"]
