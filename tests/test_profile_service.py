"""
Profile Service Tests
=====================

Tests for privacy settings and the cached public page.
"""

import uuid
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from lifeos.core.errors import ConflictError, NotFoundError, ValidationError
from lifeos.models.profile import PublicProfile
from lifeos.schemas.profile import ProfileSettingsUpdate
from lifeos.services.profile_service import ProfileService, is_unique_violation
from tests.conftest import USER_ID, make_result, make_session

TODAY = date(2026, 10, 19)


def _integrity_error(sqlstate: str) -> IntegrityError:
    orig = MagicMock()
    orig.sqlstate = sqlstate
    return IntegrityError("UPDATE public_profiles", {}, orig)


def _profile(**overrides) -> PublicProfile:
    values = dict(
        id=uuid.uuid4(),
        user_id=USER_ID,
        username="alice",
        display_name="Alice",
        bio=None,
        is_public=True,
        show_task_stats=True,
        show_habit_streaks=False,
        show_expense_summary=False,
    )
    values.update(overrides)
    return PublicProfile(**values)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSaveSettings:
    """Tests for ProfileService.save_settings"""

    @pytest.mark.asyncio
    async def test_public_profile_needs_username(self):
        db = make_session()

        with pytest.raises(ValidationError) as exc_info:
            await ProfileService(db).save_settings(USER_ID, ProfileSettingsUpdate(is_public=True))

        assert exc_info.value.field == "username"
        db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_characters(self):
        db = make_session()

        with pytest.raises(ValidationError) as exc_info:
            await ProfileService(db).save_settings(USER_ID, ProfileSettingsUpdate(username="bad name!"))

        assert exc_info.value.detail["message"] == "Only lowercase letters, numbers, and underscores allowed"

    @pytest.mark.asyncio
    async def test_creates_profile_and_drops_cache(self):
        db = make_session()
        invalidate = AsyncMock()

        with patch("lifeos.services.profile_service.CacheInvalidator.on_profile_update", invalidate):
            profile = await ProfileService(db).save_settings(
                USER_ID,
                ProfileSettingsUpdate(username="Alice_1", display_name="  Alice ", is_public=True),
            )

        assert profile.username == "alice_1"
        assert profile.display_name == "Alice"
        assert profile.is_public is True
        db.add.assert_called_once_with(profile)
        invalidate.assert_awaited_once_with(None, "alice_1")

    @pytest.mark.asyncio
    async def test_rename_drops_old_and_new_pages(self):
        db = make_session()
        existing = _profile(username="old_name")
        db.execute.return_value = make_result(scalar=existing)
        invalidate = AsyncMock()

        with patch("lifeos.services.profile_service.CacheInvalidator.on_profile_update", invalidate):
            await ProfileService(db).save_settings(USER_ID, ProfileSettingsUpdate(username="new_name"))

        invalidate.assert_awaited_once_with("old_name", "new_name")
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_cache_dropped_after_commit(self):
        db = make_session()
        db.execute.return_value = make_result(scalar=_profile(username="alice"))
        commits_seen = []

        async def record(previous, current):
            commits_seen.append(db.commit.await_count)

        with patch(
            "lifeos.services.profile_service.CacheInvalidator.on_profile_update",
            AsyncMock(side_effect=record),
        ):
            await ProfileService(db).save_settings(USER_ID, ProfileSettingsUpdate(is_public=False))

        assert commits_seen == [1]

    @pytest.mark.asyncio
    async def test_username_taken(self):
        db = make_session()
        db.flush.side_effect = _integrity_error("23505")

        with pytest.raises(ConflictError) as exc_info:
            await ProfileService(db).save_settings(USER_ID, ProfileSettingsUpdate(username="taken"))

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "PROFILE_002"
        assert exc_info.value.field == "username"

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self):
        db = make_session()
        db.flush.side_effect = _integrity_error("23502")

        with pytest.raises(IntegrityError):
            await ProfileService(db).save_settings(USER_ID, ProfileSettingsUpdate(username="someone"))

    def test_is_unique_violation_reads_pgcode(self):
        orig = MagicMock(spec=["pgcode"])
        orig.pgcode = "23505"

        assert is_unique_violation(IntegrityError("INSERT", {}, orig)) is True
        assert is_unique_violation(_integrity_error("23503")) is False


# ---------------------------------------------------------------------------
# Public page
# ---------------------------------------------------------------------------

class TestPublicView:
    """Tests for ProfileService.public_view"""

    @pytest.mark.asyncio
    async def test_unknown_or_private_is_404(self):
        db = make_session()

        with pytest.raises(NotFoundError) as exc_info:
            await ProfileService(db).public_view("nobody", TODAY)

        assert exc_info.value.code == "PROFILE_001"

    @pytest.mark.asyncio
    async def test_builds_enabled_sections_only(self):
        db = make_session()
        db.execute.side_effect = [
            make_result(scalar=_profile()),
            make_result(mappings=[{"status": "completed"}, {"status": "pending"}, {"status": "completed"}]),
        ]

        view = await ProfileService(db).public_view("  Alice ", TODAY)

        assert view == {
            "username": "alice",
            "display_name": "Alice",
            "bio": None,
            "task_stats": {"completion_rate": 67, "completed": 2},
        }
        # Profile lookup plus the task query; habits and expenses are off
        assert db.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_served_from_cache(self):
        db = make_session()
        cached = {"username": "alice", "display_name": None, "bio": None}

        with patch("lifeos.services.profile_service.CacheManager.get", AsyncMock(return_value=cached)):
            view = await ProfileService(db).public_view("alice", TODAY)

        assert view == cached
        db.execute.assert_not_called()


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_public_page_needs_no_token(anonymous_client, db_session):
    db_session.execute.side_effect = [
        make_result(scalar=_profile(show_task_stats=False)),
    ]

    response = await anonymous_client.get("/api/v1/profile/public/alice")

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["username"] == "alice"
    assert body["data"]["task_stats"] is None
