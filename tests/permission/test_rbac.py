"""Tests for the human role table."""

import pytest

from docwarden.permission.rbac import has_permission


class TestAdmin:
    @pytest.mark.parametrize("resource", ["document", "admin_panel", "ai_agent", "ai_action"])
    @pytest.mark.parametrize("action", ["create", "read", "delete", "approve", "execute"])
    def test_admin_can_do_everything(self, resource, action):
        assert has_permission("admin", action, resource)


class TestDocuments:
    def test_editor(self):
        assert has_permission("editor", "create", "document")
        assert has_permission("editor", "read", "document")
        assert has_permission("editor", "update", "document")
        assert not has_permission("editor", "delete", "document")

    def test_viewer(self):
        assert has_permission("viewer", "read", "document")
        assert not has_permission("viewer", "update", "document")

    def test_owner_can_do_everything_with_own_document(self):
        attrs = {"user_id": "u1", "owner_id": "u1"}
        assert has_permission("viewer", "delete", "document", attrs)
        assert not has_permission(
            "viewer", "delete", "document", {"user_id": "u1", "owner_id": "u2"}
        )

    def test_unknown_role(self):
        assert not has_permission("guest", "read", "document")


class TestAdminOnlyResources:
    @pytest.mark.parametrize("resource", ["admin_panel", "ai_agent"])
    @pytest.mark.parametrize("role", ["editor", "viewer"])
    def test_non_admin_denied(self, resource, role):
        assert not has_permission(role, "access", resource)
        assert not has_permission(role, "update", resource)


class TestAIActionDecisions:
    @pytest.mark.parametrize("action", ["approve", "reject"])
    def test_editor_may_decide(self, action):
        assert has_permission("editor", action, "ai_action")

    @pytest.mark.parametrize("action", ["approve", "reject"])
    def test_viewer_may_not_decide(self, action):
        assert not has_permission("viewer", action, "ai_action")

    def test_editor_may_not_execute(self):
        assert not has_permission("editor", "execute", "ai_action")
