"""
Permission engine exceptions.

Denials are not exceptions: the evaluator returns them as Decision data.
"""


class PermissionEngineError(Exception):
    """Base exception for all permission-engine errors."""

    pass


class NotFoundError(PermissionEngineError):
    """Raised when a mutating call references an unknown record."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class AgentNotFoundError(NotFoundError):
    def __init__(self, agent_id: str) -> None:
        super().__init__("Agent", agent_id)


class ActionNotFoundError(NotFoundError):
    def __init__(self, action_id: str) -> None:
        super().__init__("Action", action_id)


class InvalidTransitionError(PermissionEngineError):
    """Raised when a lifecycle transition is not allowed from the current status."""

    def __init__(self, action_id: str, current: str, attempted: str) -> None:
        self.action_id = action_id
        self.current = current
        self.attempted = attempted
        super().__init__(
            f"Cannot {attempted} action {action_id} in status '{current}'"
        )


class ApproverNotAllowedError(PermissionEngineError):
    """Raised when a human's role is not among the resource's approver roles."""

    def __init__(self, action_id: str, role: str, approver_roles: list[str]) -> None:
        self.action_id = action_id
        self.role = role
        self.approver_roles = approver_roles
        allowed = ", ".join(approver_roles) or "none"
        super().__init__(
            f"Role '{role}' may not decide on action {action_id} (approver roles: {allowed})"
        )


class UpstreamGenerationError(PermissionEngineError):
    """Raised when the content generator fails or times out."""

    pass


class SettingValidationError(PermissionEngineError):
    """Raised when a permission-setting collection breaks a uniqueness rule."""

    pass


class InvalidRequestMetadataError(PermissionEngineError):
    """Raised when caller metadata on an action request has the wrong shape."""

    pass


__all__ = [
    "PermissionEngineError",
    "NotFoundError",
    "AgentNotFoundError",
    "ActionNotFoundError",
    "InvalidTransitionError",
    "ApproverNotAllowedError",
    "UpstreamGenerationError",
    "SettingValidationError",
    "InvalidRequestMetadataError",
]
