"""
Content generation for generative document actions.
"""

from docwarden.config.settings import settings
from docwarden.generation.base import ContentGenerator, GenerationResult
from docwarden.generation.fallback import (
    FallbackContentGenerator,
    ResilientContentGenerator,
)
from docwarden.generation.llm import LLMContentGenerator
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)


def create_content_generator() -> ContentGenerator:
    """
    Build the generator from global settings.

    Without a Groq API key only the fallback generator is available.
    """
    if settings.groq_api_key is None:
        logger.warning("groq_api_key_missing_using_fallback")
        return FallbackContentGenerator()

    from docwarden.llm.openai import GroqModel

    return ResilientContentGenerator(LLMContentGenerator(GroqModel()))


__all__ = [
    "ContentGenerator",
    "GenerationResult",
    "LLMContentGenerator",
    "FallbackContentGenerator",
    "ResilientContentGenerator",
    "create_content_generator",
]
