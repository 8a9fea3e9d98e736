"""
ActionLifecycleManager - creates AI action records and drives their state machine.

    pending --approve--> approved --finalize--> completed
    pending --reject--> rejected
    pending --complete--> completed          (only when no approval was required)
    pending/approved --fail--> failed

Denied requests never create a record. Mutations of one action are
serialized by a per-action lock, so exactly one of concurrent
approve/reject/fail calls wins.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable
from uuid import uuid4

from pydantic import ValidationError

from docwarden.generation.base import ContentGenerator, GenerationResult
from docwarden.permission.action_store import ActionStore
from docwarden.permission.capabilities import is_generative
from docwarden.permission.evaluator import PermissionEvaluator
from docwarden.permission.exceptions import (
    ActionNotFoundError,
    ApproverNotAllowedError,
    InvalidRequestMetadataError,
    InvalidTransitionError,
    UpstreamGenerationError,
)
from docwarden.permission.models import (
    Action,
    ActionRequestResult,
    ActionStatus,
    ActionTransition,
    DocumentChanges,
    FailureMetadata,
    GeneratedMetadata,
    RequestMetadata,
    utc_now,
)
from docwarden.permission.setting_store import PermissionSettingStore
from docwarden.utils.logging import get_logger

logger = get_logger(__name__)


def to_request_metadata(metadata: dict[str, Any] | RequestMetadata | None) -> RequestMetadata:
    """
    Fold a caller's free-form metadata into RequestMetadata.

    Raises:
        InvalidRequestMetadataError: reason is not a string, or changes is not
            a {title, content} mapping
    """
    if metadata is None:
        return RequestMetadata()
    if isinstance(metadata, RequestMetadata):
        return metadata

    extra = dict(metadata)
    reason = extra.pop("reason", None)
    changes = extra.pop("changes", None)
    try:
        return RequestMetadata(
            reason=reason,
            changes=DocumentChanges.model_validate(changes) if changes else None,
            extra=extra,
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "changes"
        raise InvalidRequestMetadataError(
            f"Invalid action request metadata at '{field}': {first['msg']}"
        ) from e


class ActionLifecycleManager:
    """Owns every status change of an AI action."""

    def __init__(
        self,
        evaluator: PermissionEvaluator,
        actions: ActionStore,
        generator: ContentGenerator,
        settings: PermissionSettingStore | None = None,
        generation_timeout: float = 30.0,
    ) -> None:
        """
        Args:
            evaluator: Permission evaluator consulted by request_action
            actions: Action storage
            generator: Content-generation collaborator for generative actions
            settings: Setting store used to check approver roles; when None,
                approver roles are not enforced
            generation_timeout: Seconds before a generation call is abandoned
        """
        self._evaluator = evaluator
        self._actions = actions
        self._generator = generator
        self._settings = settings
        self._generation_timeout = generation_timeout
        # action id -> (lock, number of callers holding or waiting on it)
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _locked(self, action_id: str) -> AsyncIterator[None]:
        """Hold the action's lock; the entry is dropped when no caller needs it."""
        lock, users = self._locks.get(action_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[action_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            _, users = self._locks[action_id]
            if users == 1:
                del self._locks[action_id]
            else:
                self._locks[action_id] = (lock, users - 1)

    # ── Requests ────────────────────────────────────────────────────────

    async def request_action(
        self,
        agent_id: str,
        action_type: str,
        resource_type: str,
        resource_id: str,
        metadata: dict[str, Any] | RequestMetadata | None = None,
        *,
        title: str = "",
        content: str = "",
    ) -> ActionRequestResult:
        """
        Request an action on behalf of an agent.

        Process:
        1. Evaluate permission (denial → declined result, no record)
        2. Create a pending record
        3. For generative actions, call the generator under the timeout;
           an error or timeout fails the record (soft failure)
        4. Leave the record pending if approval is required, else complete it

        Args:
            agent_id: Requesting agent
            action_type: Action tag, e.g. "summarize_document"
            resource_type: Target resource type, e.g. "document"
            resource_id: Target resource id
            metadata: Caller metadata (reason, proposed changes, extras)
            title: Document title passed to the generator
            content: Document content passed to the generator

        Raises:
            InvalidRequestMetadataError: metadata has the wrong shape; no
                record is created
        """
        decision = await self._evaluator.evaluate(
            agent_id, action_type, resource_type, resource_id
        )
        if not decision.permitted:
            logger.info(
                "action_request_declined",
                agent_id=agent_id,
                action_type=action_type,
                resource_id=resource_id,
                reason=decision.reason,
            )
            return ActionRequestResult(
                success=False,
                message=f"AI agent does not have permission for this action: {decision.reason}",
                decision=decision,
            )

        request_metadata = to_request_metadata(metadata)
        now = utc_now()
        action = Action(
            id=f"action-{uuid4().hex[:8]}",
            agent_id=agent_id,
            action_type=action_type,
            resource_type=resource_type,
            resource_id=resource_id,
            status=ActionStatus.PENDING,
            requires_approval=decision.requires_approval,
            requested_at=now,
            requested_by=agent_id,
            metadata=request_metadata,
            history=[ActionTransition(status=ActionStatus.PENDING, at=now, actor=agent_id)],
        )

        async with self._locked(action.id):
            await self._actions.save_action(action)
            logger.info(
                "action_created",
                action_id=action.id,
                agent_id=agent_id,
                action_type=action_type,
                requires_approval=decision.requires_approval,
            )

            if is_generative(action_type):
                generated, error = await self._run_generation(
                    action, title, content, request_metadata
                )
                if error is not None:
                    self._apply_fail(action, error)
                    await self._actions.save_action(action)
                    return ActionRequestResult(
                        success=False,
                        message=f"AI processing error: {error}",
                        decision=decision,
                        action=action,
                    )
                action.metadata = GeneratedMetadata(
                    reason=request_metadata.reason,
                    result=generated.result,
                    changes=generated.changes or request_metadata.changes,
                    fallback=generated.fallback,
                    extra=request_metadata.extra,
                )

            if decision.requires_approval:
                await self._actions.save_action(action)
                return ActionRequestResult(
                    success=True,
                    message="Action request created and pending approval",
                    decision=decision,
                    action=action,
                )

            self._apply_finalize(action, self._result_of(action), actor=None)
            await self._actions.save_action(action)

        fallback = isinstance(action.metadata, GeneratedMetadata) and action.metadata.fallback
        message = (
            "Action completed with fallback content (AI API unavailable)"
            if fallback
            else "Action completed successfully"
        )
        return ActionRequestResult(
            success=True, message=message, decision=decision, action=action
        )

    async def _run_generation(
        self,
        action: Action,
        title: str,
        content: str,
        request_metadata: RequestMetadata,
    ) -> tuple[GenerationResult | None, str | None]:
        """Return (result, None) on success or (None, error message) on failure."""
        target_language = request_metadata.extra.get("target_language")
        try:
            generated = await asyncio.wait_for(
                self._generator.generate(
                    action.action_type,
                    title,
                    content,
                    target_language=target_language,
                ),
                timeout=self._generation_timeout,
            )
            return generated, None
        except asyncio.TimeoutError:
            error = f"Content generation timed out after {self._generation_timeout:g}s"
        except UpstreamGenerationError as e:
            error = str(e)
        except Exception as e:
            logger.error(
                "generation_unexpected_error",
                action_id=action.id,
                error=str(e),
                exc_info=True,
            )
            error = f"Unexpected generation error: {e}"

        logger.warning(
            "generation_failed",
            action_id=action.id,
            action_type=action.action_type,
            error=error,
        )
        return None, error

    # ── Transitions ─────────────────────────────────────────────────────

    async def approve_action(
        self,
        action_id: str,
        user_id: str,
        *,
        approver_role: str | None = None,
        execute: bool = True,
    ) -> Action:
        """
        Approve a pending action.

        With execute=True (default) the approval and the completion happen
        under one lock; both transitions are recorded in the history.

        Raises:
            ActionNotFoundError: unknown action id
            ApproverNotAllowedError: approver_role is not an approver role
            InvalidTransitionError: action is not pending
        """

        def apply(action: Action) -> list[ActionStatus]:
            self._apply_approve(action, user_id)
            if not execute:
                return [ActionStatus.APPROVED]
            self._apply_finalize(action, self._result_of(action), actor=user_id)
            return [ActionStatus.APPROVED, ActionStatus.COMPLETED]

        return await self._transition(
            action_id,
            "approve",
            {ActionStatus.PENDING},
            apply,
            approver_role=approver_role,
        )

    async def finalize_action(self, action_id: str, result: str | None = None) -> Action:
        """Complete an approved action; result defaults to the generated text."""

        def apply(action: Action) -> list[ActionStatus]:
            self._apply_finalize(
                action, result if result is not None else self._result_of(action), actor=None
            )
            return [ActionStatus.COMPLETED]

        return await self._transition(action_id, "finalize", {ActionStatus.APPROVED}, apply)

    async def reject_action(
        self,
        action_id: str,
        user_id: str,
        *,
        approver_role: str | None = None,
        reason: str | None = None,
    ) -> Action:
        def apply(action: Action) -> list[ActionStatus]:
            action.status = ActionStatus.REJECTED
            action.rejected_by = user_id
            action.history.append(
                ActionTransition(status=ActionStatus.REJECTED, actor=user_id, note=reason)
            )
            return [ActionStatus.REJECTED]

        return await self._transition(
            action_id,
            "reject",
            {ActionStatus.PENDING},
            apply,
            approver_role=approver_role,
        )

    async def complete_action(self, action_id: str, result: str | None = None) -> Action:
        """Auto-path completion for an action that needed no approval."""

        def apply(action: Action) -> list[ActionStatus]:
            if action.requires_approval:
                raise InvalidTransitionError(action.id, action.status.value, "complete")
            self._apply_finalize(
                action, result if result is not None else self._result_of(action), actor=None
            )
            return [ActionStatus.COMPLETED]

        return await self._transition(action_id, "complete", {ActionStatus.PENDING}, apply)

    async def fail_action(self, action_id: str, error: str) -> Action:
        def apply(action: Action) -> list[ActionStatus]:
            self._apply_fail(action, error)
            return [ActionStatus.FAILED]

        return await self._transition(
            action_id,
            "fail",
            {ActionStatus.PENDING, ActionStatus.APPROVED},
            apply,
        )

    async def _transition(
        self,
        action_id: str,
        attempted: str,
        allowed_from: set[ActionStatus],
        apply: Callable[[Action], list[ActionStatus]],
        *,
        approver_role: str | None = None,
    ) -> Action:
        async with self._locked(action_id):
            action = await self._actions.get_action(action_id)
            if action is None:
                raise ActionNotFoundError(action_id)

            if approver_role is not None:
                await self._check_approver(action, approver_role)

            if action.status not in allowed_from:
                logger.warning(
                    "action_transition_rejected",
                    action_id=action_id,
                    status=action.status.value,
                    attempted=attempted,
                )
                raise InvalidTransitionError(action_id, action.status.value, attempted)

            previous = action.status
            # apply() works on a fresh copy from the store; nothing is saved if it raises
            reached = apply(action)
            await self._actions.save_action(action)

            logger.info(
                "action_transitioned",
                action_id=action_id,
                from_status=previous.value,
                to_status=[s.value for s in reached],
            )
            return action

    async def _check_approver(self, action: Action, role: str) -> None:
        if self._settings is None:
            return
        setting = await self._settings.lookup(action.resource_type, action.resource_id)
        approver_roles = setting.approver_roles if setting else []
        if role not in approver_roles:
            raise ApproverNotAllowedError(action.id, role, approver_roles)

    # ── State mutation helpers (caller holds the lock) ──────────────────

    @staticmethod
    def _result_of(action: Action) -> str | None:
        if isinstance(action.metadata, GeneratedMetadata):
            return action.metadata.result
        return action.result

    @staticmethod
    def _apply_approve(action: Action, user_id: str) -> None:
        action.status = ActionStatus.APPROVED
        action.approved_by = user_id
        action.history.append(ActionTransition(status=ActionStatus.APPROVED, actor=user_id))

    @staticmethod
    def _apply_finalize(action: Action, result: str | None, actor: str | None) -> None:
        now = utc_now()
        action.status = ActionStatus.COMPLETED
        action.completed_at = now
        if result is not None:
            action.result = result
        action.history.append(
            ActionTransition(status=ActionStatus.COMPLETED, at=now, actor=actor)
        )

    @staticmethod
    def _apply_fail(action: Action, error: str) -> None:
        now = utc_now()
        previous = action.metadata
        action.status = ActionStatus.FAILED
        action.completed_at = now
        action.metadata = FailureMetadata(
            reason=previous.reason, error=error, extra=previous.extra
        )
        action.history.append(
            ActionTransition(status=ActionStatus.FAILED, at=now, note=error)
        )

    # ── Read accessors ──────────────────────────────────────────────────

    async def get_action(self, action_id: str) -> Action:
        action = await self._actions.get_action(action_id)
        if action is None:
            raise ActionNotFoundError(action_id)
        return action

    async def list_actions(self) -> list[Action]:
        return await self._actions.list_actions()

    async def list_pending_actions(self) -> list[Action]:
        return await self._actions.list_actions(status=ActionStatus.PENDING)

    async def list_actions_for_resource(self, resource_id: str) -> list[Action]:
        return await self._actions.list_actions(resource_id=resource_id)

    async def list_actions_for_agent(self, agent_id: str) -> list[Action]:
        return await self._actions.list_actions(agent_id=agent_id)


__all__ = ["ActionLifecycleManager", "to_request_metadata"]
