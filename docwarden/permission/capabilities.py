"""
Capability model.

Static vocabulary of agent capabilities, coarse actions and permission levels,
plus the single action -> capability table the evaluator consults.
"""

from enum import Enum


class Capability(str, Enum):
    """Atomic grant held by an AI agent."""

    READ_DOCUMENTS = "read_documents"
    SUGGEST_EDITS = "suggest_edits"
    CREATE_DOCUMENTS = "create_documents"
    EDIT_DOCUMENTS = "edit_documents"
    DELETE_DOCUMENTS = "delete_documents"
    ANALYZE_CONTENT = "analyze_content"
    SUMMARIZE_CONTENT = "summarize_content"
    TRANSLATE_CONTENT = "translate_content"
    GENERATE_CONTENT = "generate_content"


class ActionType(str, Enum):
    """Coarse action an agent may request against a resource."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ANALYZE_DOCUMENT = "analyze_document"
    SUMMARIZE_DOCUMENT = "summarize_document"
    TRANSLATE_DOCUMENT = "translate_document"
    IMPROVE_DOCUMENT = "improve_document"


class PermissionLevel(str, Enum):
    """Resource-scoped posture for AI agents."""

    NO_ACCESS = "no_access"
    READ_ONLY = "read_only"
    SUGGEST_ONLY = "suggest_only"  # any action, writes always supervised
    FULL_ACCESS = "full_access"


# Any one capability in the set satisfies the action.
ACTION_REQUIREMENTS: dict[ActionType, frozenset[Capability]] = {
    ActionType.READ: frozenset({Capability.READ_DOCUMENTS}),
    ActionType.CREATE: frozenset({Capability.CREATE_DOCUMENTS}),
    ActionType.UPDATE: frozenset(
        {Capability.EDIT_DOCUMENTS, Capability.SUGGEST_EDITS}
    ),
    ActionType.DELETE: frozenset({Capability.DELETE_DOCUMENTS}),
    ActionType.ANALYZE_DOCUMENT: frozenset({Capability.ANALYZE_CONTENT}),
    ActionType.SUMMARIZE_DOCUMENT: frozenset({Capability.SUMMARIZE_CONTENT}),
    ActionType.TRANSLATE_DOCUMENT: frozenset({Capability.TRANSLATE_CONTENT}),
    ActionType.IMPROVE_DOCUMENT: frozenset(
        {
            Capability.EDIT_DOCUMENTS,
            Capability.SUGGEST_EDITS,
            Capability.GENERATE_CONTENT,
        }
    ),
}

READ_CLASS_ACTIONS: frozenset[ActionType] = frozenset(
    {
        ActionType.READ,
        ActionType.ANALYZE_DOCUMENT,
        ActionType.SUMMARIZE_DOCUMENT,
    }
)

MUTATING_ACTIONS: frozenset[ActionType] = frozenset(
    {
        ActionType.CREATE,
        ActionType.UPDATE,
        ActionType.DELETE,
        ActionType.IMPROVE_DOCUMENT,
    }
)

# Actions that call the content generator before the record settles.
GENERATIVE_ACTIONS: frozenset[ActionType] = frozenset(
    {
        ActionType.ANALYZE_DOCUMENT,
        ActionType.SUMMARIZE_DOCUMENT,
        ActionType.TRANSLATE_DOCUMENT,
        ActionType.IMPROVE_DOCUMENT,
    }
)


def parse_action(action: str | ActionType) -> ActionType | None:
    """Return the ActionType for a raw tag, or None for tags outside the vocabulary."""
    if isinstance(action, ActionType):
        return action
    try:
        return ActionType(action)
    except ValueError:
        return None


def required_capabilities(action: str | ActionType) -> frozenset[Capability]:
    """Capabilities that satisfy `action`; empty for unmapped actions."""
    parsed = parse_action(action)
    if parsed is None:
        return frozenset()
    return ACTION_REQUIREMENTS.get(parsed, frozenset())


def has_capability_for(
    capabilities: set[Capability] | frozenset[Capability] | list[Capability],
    action: str | ActionType,
) -> bool:
    """True when the capability set intersects the action's requirement."""
    required = required_capabilities(action)
    return bool(required & set(capabilities))


def is_read_class(action: str | ActionType) -> bool:
    return parse_action(action) in READ_CLASS_ACTIONS


def is_mutating(action: str | ActionType) -> bool:
    return parse_action(action) in MUTATING_ACTIONS


def is_generative(action: str | ActionType) -> bool:
    return parse_action(action) in GENERATIVE_ACTIONS


__all__ = [
    "Capability",
    "ActionType",
    "PermissionLevel",
    "ACTION_REQUIREMENTS",
    "READ_CLASS_ACTIONS",
    "MUTATING_ACTIONS",
    "GENERATIVE_ACTIONS",
    "parse_action",
    "required_capabilities",
    "has_capability_for",
    "is_read_class",
    "is_mutating",
    "is_generative",
]
