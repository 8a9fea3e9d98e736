"""
Content-generation collaborator interface.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from docwarden.permission.models import DocumentChanges


class GenerationResult(BaseModel):
    """Output of one generation call."""

    result: str
    changes: DocumentChanges | None = None
    fallback: bool = False  # produced without the real model


class ContentGenerator(ABC):
    """Produces text for generative document actions."""

    @abstractmethod
    async def generate(
        self,
        action_type: str,
        title: str,
        content: str,
        *,
        target_language: str | None = None,
    ) -> GenerationResult:
        """
        Generate content for an action on a document.

        Raises:
            UpstreamGenerationError: the provider failed or the action type
                is not one this generator handles
        """
        ...

    async def close(self) -> None:
        pass


__all__ = ["ContentGenerator", "GenerationResult"]
