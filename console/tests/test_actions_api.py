"""
Integration tests for the /api/actions endpoints.

Covers requesting actions, the approval workflow and its HTTP error mapping.
"""

import pytest

from httpx import ASGITransport, AsyncClient

from docwarden.generation.fallback import FallbackContentGenerator
from docwarden.permission.factory import create_permission_engine

from server.app import create_app
from server.config import ConsoleConfig
from server.dependencies import set_console_config, set_permission_engine


@pytest.fixture
async def client():
    """Create test client backed by a seeded in-memory engine."""
    app = create_app()

    set_console_config(ConsoleConfig(storage_type="memory"))
    engine = create_permission_engine(
        storage_type="memory",
        seed=True,
        generator=FallbackContentGenerator(),
        generation_timeout=5.0,
    )
    set_permission_engine(engine)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    await engine.close()


class TestListActions:
    @pytest.mark.asyncio
    async def test_list_all(self, client):
        resp = await client.get("/api/actions")
        assert resp.status_code == 200
        data = resp.json()
        assert [a["id"] for a in data] == ["action-1", "action-2", "action-3"]

    @pytest.mark.asyncio
    async def test_filter_by_status(self, client):
        resp = await client.get("/api/actions?status=pending")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 1
        assert data[0]["id"] == "action-1"

    @pytest.mark.asyncio
    async def test_filter_by_resource_and_agent(self, client):
        resp = await client.get("/api/actions?resource_id=2")
        assert [a["id"] for a in resp.json()] == ["action-2"]

        resp = await client.get("/api/actions?agent_id=ai-analyzer-1")
        assert [a["id"] for a in resp.json()] == ["action-3"]

    @pytest.mark.asyncio
    async def test_filter_invalid_status(self, client):
        resp = await client.get("/api/actions?status=invalid")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_get_action(self, client):
        resp = await client.get("/api/actions/action-1")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "pending"
        assert data["metadata"]["kind"] == "generated"
        assert data["metadata"]["changes"]["title"] == "Updated Getting Started Guide"

    @pytest.mark.asyncio
    async def test_get_nonexistent(self, client):
        resp = await client.get("/api/actions/nonexistent")
        assert resp.status_code == 404


class TestRequestAction:
    @pytest.mark.asyncio
    async def test_auto_completed_with_fallback(self, client):
        resp = await client.post(
            "/api/actions",
            json={
                "agent_id": "ai-assistant-1",
                "action_type": "summarize_document",
                "resource_id": "2",
                "title": "Security Policy",
                "content": "Access control rules.",
            },
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert "fallback" in data["message"]
        action = data["action"]
        assert action["status"] == "completed"
        assert action["result"].startswith("Fallback content:")
        assert action["completed_at"] is not None

    @pytest.mark.asyncio
    async def test_pending_approval(self, client):
        resp = await client.post(
            "/api/actions",
            json={
                "agent_id": "ai-editor-1",
                "action_type": "improve_document",
                "resource_id": "1",
                "title": "Getting Started Guide",
                "content": "Welcome.",
                "metadata": {"reason": "clarity"},
            },
        )
        data = resp.json()
        assert data["success"] is True
        assert data["message"] == "Action request created and pending approval"
        action = data["action"]
        assert action["status"] == "pending"
        assert action["requires_approval"] is True
        assert action["metadata"]["reason"] == "clarity"
        assert action["metadata"]["changes"]["title"] == "Improved: Getting Started Guide"

    @pytest.mark.asyncio
    async def test_denied_creates_no_record(self, client):
        resp = await client.post(
            "/api/actions",
            json={
                "agent_id": "ai-analyzer-1",
                "action_type": "update",
                "resource_id": "2",
            },
        )
        data = resp.json()
        assert data["success"] is False
        assert data["action"] is None
        assert data["decision"]["permitted"] is False

        resp = await client.get("/api/actions")
        assert len(resp.json()) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "metadata",
        [{"changes": "not-a-dict"}, {"changes": {"title": "T"}}, {"reason": 5}],
    )
    async def test_malformed_metadata_rejected(self, client, metadata):
        resp = await client.post(
            "/api/actions",
            json={
                "agent_id": "ai-editor-1",
                "action_type": "update",
                "resource_id": "1",
                "metadata": metadata,
            },
        )
        assert resp.status_code == 422

        resp = await client.get("/api/actions")
        assert len(resp.json()) == 3

    @pytest.mark.asyncio
    async def test_extra_metadata_kept(self, client):
        resp = await client.post(
            "/api/actions",
            json={
                "agent_id": "ai-editor-1",
                "action_type": "update",
                "resource_id": "1",
                "metadata": {
                    "reason": "typo",
                    "changes": {"title": "Guide", "content": "Fixed."},
                    "ticket": "DOC-7",
                },
            },
        )
        assert resp.status_code == 200
        metadata = resp.json()["action"]["metadata"]
        assert metadata["kind"] == "request"
        assert metadata["reason"] == "typo"
        assert metadata["changes"] == {"title": "Guide", "content": "Fixed."}
        assert metadata["extra"] == {"ticket": "DOC-7"}


class TestApprovalWorkflow:
    @pytest.mark.asyncio
    async def test_approve_completes(self, client):
        resp = await client.post(
            "/api/actions/action-1/approve",
            json={"user_id": "admin-id", "user_role": "admin"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "completed"
        assert data["approved_by"] == "admin-id"
        assert data["result"] == "Document improvement suggestions generated"
        assert [h["status"] for h in data["history"]] == [
            "pending",
            "approved",
            "completed",
        ]

    @pytest.mark.asyncio
    async def test_approve_without_execute(self, client):
        resp = await client.post(
            "/api/actions/action-1/approve",
            json={"user_id": "admin-id", "user_role": "admin", "execute": False},
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "approved"

    @pytest.mark.asyncio
    async def test_double_approve_conflict(self, client):
        body = {"user_id": "admin-id", "user_role": "admin"}
        first = await client.post("/api/actions/action-1/approve", json=body)
        assert first.status_code == 200
        second = await client.post("/api/actions/action-1/approve", json=body)
        assert second.status_code == 409

    @pytest.mark.asyncio
    async def test_approve_rejected_action_conflict(self, client):
        resp = await client.post(
            "/api/actions/action-3/approve",
            json={"user_id": "admin-id", "user_role": "admin"},
        )
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_viewer_cannot_approve(self, client):
        resp = await client.post(
            "/api/actions/action-1/approve",
            json={"user_id": "viewer-id", "user_role": "viewer"},
        )
        assert resp.status_code == 403

        resp = await client.get("/api/actions/action-1")
        assert resp.json()["status"] == "pending"

    @pytest.mark.asyncio
    async def test_editor_not_approver_for_resource(self, client):
        resp = await client.post(
            "/api/actions/action-1/approve",
            json={"user_id": "editor-id", "user_role": "editor"},
        )
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_reject(self, client):
        resp = await client.post(
            "/api/actions/action-1/reject",
            json={"user_id": "admin-id", "user_role": "admin", "reason": "off-topic"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "rejected"
        assert data["rejected_by"] == "admin-id"
        assert data["history"][-1]["note"] == "off-topic"

    @pytest.mark.asyncio
    async def test_reject_completed_conflict(self, client):
        resp = await client.post(
            "/api/actions/action-2/reject",
            json={"user_id": "admin-id", "user_role": "admin"},
        )
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_approve_nonexistent(self, client):
        resp = await client.post(
            "/api/actions/nonexistent/approve",
            json={"user_id": "admin-id", "user_role": "admin"},
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_approve_missing_role(self, client):
        resp = await client.post(
            "/api/actions/action-1/approve", json={"user_id": "admin-id"}
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_fail(self, client):
        resp = await client.post(
            "/api/actions/action-1/fail", json={"error": "document locked"}
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "failed"
        assert data["metadata"]["kind"] == "failure"
        assert data["metadata"]["error"] == "document locked"

        again = await client.post(
            "/api/actions/action-1/fail", json={"error": "again"}
        )
        assert again.status_code == 409
