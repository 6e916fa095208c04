"""
Task API Tests
==============

Tests for the task endpoints with a mocked database session.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
import uuid

import pytest
from httpx import AsyncClient

from lifeos.models.task import Task, TaskStatus
from tests.conftest import USER_ID, make_result

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


def _stored_task(status: TaskStatus = TaskStatus.PENDING) -> Task:
    return Task(
        id=uuid.uuid4(),
        user_id=USER_ID,
        title="Write report",
        category="Work",
        status=status,
        created_at=NOW,
        updated_at=NOW,
    )


async def _fill_server_defaults(obj):
    """What flush + refresh would populate on a real session."""
    obj.id = obj.id or uuid.uuid4()
    obj.created_at = obj.created_at or NOW
    obj.updated_at = obj.updated_at or NOW


class TestTaskEndpoints:
    """Tests for /api/v1/tasks"""

    @pytest.mark.asyncio
    async def test_create_task(self, client: AsyncClient, db_session):
        db_session.refresh.side_effect = _fill_server_defaults

        response = await client.post("/api/v1/tasks", json={"title": "  Plan sprint  ", "category": "Work"})

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "Plan sprint"
        assert data["status"] == "pending"
        assert data["user_id"] == str(USER_ID)
        db_session.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_defaults_category(self, client: AsyncClient, db_session):
        db_session.refresh.side_effect = _fill_server_defaults

        response = await client.post("/api/v1/tasks", json={"title": "Stretch"})

        assert response.json()["data"]["category"] == "Personal"

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, client: AsyncClient, db_session):
        response = await client.post("/api/v1/tasks", json={"title": "   "})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["field"] == "title"
        db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_toggle_flips_status(self, client: AsyncClient, db_session):
        task = _stored_task()
        db_session.execute.return_value = make_result(scalar=task)

        response = await client.patch(f"/api/v1/tasks/{task.id}/toggle")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "completed"

        response = await client.patch(f"/api/v1/tasks/{task.id}/toggle")

        assert response.json()["data"]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_toggle_unknown_task(self, client: AsyncClient):
        response = await client.patch(f"/api/v1/tasks/{uuid.uuid4()}/toggle")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {"code": "TASK_001", "message": "Task not found"},
        }

    @pytest.mark.asyncio
    async def test_list_tasks(self, client: AsyncClient, db_session):
        db_session.execute.return_value = make_result(scalars=[_stored_task(), _stored_task(TaskStatus.COMPLETED)])

        response = await client.get("/api/v1/tasks", params={"status": "completed"})

        assert response.status_code == 200
        assert len(response.json()["data"]) == 2

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_status(self, client: AsyncClient):
        response = await client.get("/api/v1/tasks", params={"status": "done"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_task(self, client: AsyncClient, db_session):
        task = _stored_task()
        db_session.execute.return_value = make_result(scalar=task)

        response = await client.delete(f"/api/v1/tasks/{task.id}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Task deleted"}
        db_session.delete.assert_awaited_once_with(task)

    @pytest.mark.asyncio
    async def test_toggle_drops_analytics_after_commit(self, client: AsyncClient, db_session):
        task = _stored_task()
        db_session.execute.return_value = make_result(scalar=task)
        commits_seen = []

        async def record(user_id):
            commits_seen.append(db_session.commit.await_count)

        with patch(
            "lifeos.services.cache.CacheInvalidator.on_activity_change",
            AsyncMock(side_effect=record),
        ):
            response = await client.patch(f"/api/v1/tasks/{task.id}/toggle")

        assert response.status_code == 200
        assert commits_seen == [1]

    @pytest.mark.asyncio
    async def test_requires_token(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get("/api/v1/tasks")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_001"
