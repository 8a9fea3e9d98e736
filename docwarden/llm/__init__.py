from docwarden.llm.base import Model, StreamChunk
from docwarden.llm.openai import GroqModel, OpenAIModel

__all__ = [
    "Model",
    "StreamChunk",
    "OpenAIModel",
    "GroqModel",
]
