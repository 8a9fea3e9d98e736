"""
Fallback generation when the model is unavailable.

FallbackContentGenerator produces deterministic placeholder text.
ResilientContentGenerator tries a primary generator and falls back on
provider errors; timeouts and cancellation are not masked.
"""

from docwarden.generation.base import ContentGenerator, GenerationResult
from docwarden.permission.capabilities import ActionType, parse_action
from docwarden.permission.exceptions import UpstreamGenerationError
from docwarden.permission.models import DocumentChanges
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_PREFIX = "Fallback content:"


def _document_kind(title: str) -> str:
    if "Report" in title:
        return "Report"
    if "Policy" in title:
        return "Policy"
    return "General Document"


class FallbackContentGenerator(ContentGenerator):
    """Placeholder output, marked fallback=True."""

    async def generate(
        self,
        action_type: str,
        title: str,
        content: str,
        *,
        target_language: str | None = None,
    ) -> GenerationResult:
        action = parse_action(action_type)
        logger.info("fallback_generation", action_type=action_type)

        if action == ActionType.SUMMARIZE_DOCUMENT:
            result = (
                f'{FALLBACK_PREFIX} Summary of "{title}"\n\n'
                "This is a mock summary generated because the AI API is not available.\n\n"
                f"The document appears to be about {title.lower()} and contains "
                f"approximately {len(content)} characters."
            )
            return GenerationResult(result=result, fallback=True)

        if action == ActionType.ANALYZE_DOCUMENT:
            result = (
                f'{FALLBACK_PREFIX} Analysis of "{title}"\n\n'
                f"Document Type: {_document_kind(title)}\n\n"
                f"Key Topics: {title}\n\n"
                f"Structure: The document contains approximately {len(content)} characters.\n\n"
                "This is a mock analysis generated because the AI API is not available."
            )
            return GenerationResult(result=result, fallback=True)

        if action == ActionType.IMPROVE_DOCUMENT:
            return GenerationResult(
                result=f"{FALLBACK_PREFIX} Document improvement suggestions generated",
                changes=DocumentChanges(
                    title=f"Improved: {title}",
                    content=(
                        f"{content}\n\n[This is mock improved content generated because "
                        "the AI API is not available.]"
                    ),
                ),
                fallback=True,
            )

        if action == ActionType.TRANSLATE_DOCUMENT:
            language = target_language or "the target language"
            result = (
                f'{FALLBACK_PREFIX} Translation of "{title}" into {language} '
                "is unavailable because the AI API is not available."
            )
            return GenerationResult(result=result, fallback=True)

        result = (
            f"{FALLBACK_PREFIX} The AI service is currently unavailable.\n\n"
            f'This is a mock response for your document "{title}".'
        )
        return GenerationResult(result=result, fallback=True)


class ResilientContentGenerator(ContentGenerator):
    """Primary generator with a fallback for provider errors."""

    def __init__(
        self,
        primary: ContentGenerator,
        fallback: ContentGenerator | None = None,
    ) -> None:
        self._primary = primary
        self._fallback = fallback or FallbackContentGenerator()

    async def generate(
        self,
        action_type: str,
        title: str,
        content: str,
        *,
        target_language: str | None = None,
    ) -> GenerationResult:
        try:
            return await self._primary.generate(
                action_type, title, content, target_language=target_language
            )
        except UpstreamGenerationError as e:
            logger.warning(
                "generation_falling_back", action_type=action_type, error=str(e)
            )
            return await self._fallback.generate(
                action_type, title, content, target_language=target_language
            )

    async def close(self) -> None:
        await self._primary.close()
        await self._fallback.close()


__all__ = [
    "FALLBACK_PREFIX",
    "FallbackContentGenerator",
    "ResilientContentGenerator",
]
