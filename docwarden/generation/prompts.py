"""
Prompt templates for document actions, and parsing of improved documents.
"""

import re

from docwarden.permission.capabilities import ActionType
from docwarden.permission.models import DocumentChanges

SYSTEM_PROMPTS: dict[ActionType, str] = {
    ActionType.SUMMARIZE_DOCUMENT: (
        "You are an AI assistant that specializes in summarizing documents "
        "clearly and concisely."
    ),
    ActionType.ANALYZE_DOCUMENT: (
        "You are an AI assistant that specializes in document analysis and "
        "content evaluation."
    ),
    ActionType.IMPROVE_DOCUMENT: (
        "You are an AI assistant that specializes in improving document "
        "quality and readability."
    ),
    ActionType.TRANSLATE_DOCUMENT: (
        "You are an AI assistant that translates documents faithfully, "
        "preserving structure and tone."
    ),
}


def build_user_prompt(
    action: ActionType, title: str, content: str, target_language: str
) -> str:
    body = f"Title: {title}\n\nContent:\n{content}"

    if action == ActionType.SUMMARIZE_DOCUMENT:
        return (
            "Please provide a concise summary of the following document:\n\n"
            f"{body}\n\n"
            "Your summary should capture the main points and key information in the document."
        )
    if action == ActionType.ANALYZE_DOCUMENT:
        return (
            "Please analyze the following document:\n\n"
            f"{body}\n\n"
            "Provide an analysis that includes:\n"
            "1. Document type and purpose\n"
            "2. Key topics and themes\n"
            "3. Tone and style assessment\n"
            "4. Structure evaluation\n"
            "5. Recommendations for improvement"
        )
    if action == ActionType.IMPROVE_DOCUMENT:
        return (
            "Please improve the following document:\n\n"
            f"{body}\n\n"
            "Provide an improved version with:\n"
            "1. Better clarity and readability\n"
            "2. Enhanced structure\n"
            "3. More professional tone (if appropriate)\n"
            "4. Corrected grammar and style issues\n"
            "5. Expanded content where needed\n\n"
            "Return ONLY the improved title and content without any explanations "
            "or additional text."
        )
    if action == ActionType.TRANSLATE_DOCUMENT:
        return (
            f"Translate the following document into {target_language}:\n\n"
            f"{body}\n\n"
            "Return only the translated title on the first line, then the translated content."
        )
    raise ValueError(f"No prompt for action: {action.value}")


_TITLE_LINE = re.compile(r"^#\s+(.+)$|^Title:\s*(.+)$", re.MULTILINE)


def parse_improved_document(
    original_title: str, response: str
) -> DocumentChanges:
    """
    Split a model response into title and content.

    A leading "# Heading" or "Title: ..." line becomes the title; otherwise the
    original title is kept and the whole response is the content.
    """
    match = _TITLE_LINE.search(response)
    if match is None:
        return DocumentChanges(title=original_title, content=response.strip())

    title = (match.group(1) or match.group(2)).strip()
    content = (response[: match.start()] + response[match.end():]).strip()
    return DocumentChanges(title=title, content=content)


__all__ = ["SYSTEM_PROMPTS", "build_user_prompt", "parse_improved_document"]
