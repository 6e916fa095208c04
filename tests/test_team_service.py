"""
Team Service Tests
==================

Tests for membership checks, invite-code joins and shared items.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from lifeos.core.errors import ForbiddenError, NotFoundError, ValidationError
from lifeos.models.task import TaskStatus
from lifeos.models.team import SharedTask, Team, TeamMember, TeamRole
from lifeos.schemas.team import SharedExpenseCreate, TeamCreate
from lifeos.services.team_service import TeamService
from tests.conftest import USER_ID, make_result, make_session

TEAM_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


def _team() -> Team:
    return Team(id=TEAM_ID, name="Household", invite_code="ab12cd34", created_by=uuid.uuid4())


def _member(role: TeamRole = TeamRole.MEMBER) -> TeamMember:
    return TeamMember(id=uuid.uuid4(), team_id=TEAM_ID, user_id=USER_ID, role=role)


# ---------------------------------------------------------------------------
# Joining
# ---------------------------------------------------------------------------

class TestJoinTeam:
    """Tests for TeamService.join_team"""

    @pytest.mark.asyncio
    async def test_unknown_code(self):
        db = make_session()

        with pytest.raises(NotFoundError) as exc_info:
            await TeamService(db).join_team(USER_ID, "nope")

        assert exc_info.value.code == "TEAM_002"
        assert exc_info.value.detail["message"] == "No team found with this invite code"

    @pytest.mark.asyncio
    async def test_joins_as_member(self):
        db = make_session()
        team = _team()
        db.execute.side_effect = [make_result(scalar=team), make_result(scalar=None)]

        joined, already_member = await TeamService(db).join_team(USER_ID, "  AB12CD34 ")

        assert joined is team
        assert already_member is False
        added = db.add.call_args.args[0]
        assert isinstance(added, TeamMember)
        assert added.role == TeamRole.MEMBER
        assert added.user_id == USER_ID

    @pytest.mark.asyncio
    async def test_second_join_is_not_an_error(self):
        db = make_session()
        db.execute.side_effect = [make_result(scalar=_team()), make_result(scalar=uuid.uuid4())]

        _, already_member = await TeamService(db).join_team(USER_ID, "ab12cd34")

        assert already_member is True
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_join_reports_already_member(self):
        """A unique violation on the savepoint means another request won."""
        db = make_session()
        db.execute.side_effect = [make_result(scalar=_team()), make_result(scalar=None)]
        db.begin_nested.return_value.__aexit__.side_effect = IntegrityError(
            "INSERT INTO team_members", {}, Exception("duplicate key")
        )

        _, already_member = await TeamService(db).join_team(USER_ID, "ab12cd34")

        assert already_member is True


# ---------------------------------------------------------------------------
# Membership-gated operations
# ---------------------------------------------------------------------------

class TestMembership:
    """Tests for member-only operations"""

    @pytest.mark.asyncio
    async def test_non_member_is_forbidden(self):
        db = make_session()

        with pytest.raises(ForbiddenError) as exc_info:
            await TeamService(db).team_detail(TEAM_ID, USER_ID)

        assert exc_info.value.status_code == 403
        assert exc_info.value.code == "TEAM_003"

    @pytest.mark.asyncio
    async def test_toggle_shared_task(self):
        db = make_session()
        task = SharedTask(
            id=uuid.uuid4(),
            team_id=TEAM_ID,
            title="Buy groceries",
            status=TaskStatus.PENDING,
            created_by=USER_ID,
        )
        db.execute.side_effect = [make_result(scalar=_member()), make_result(scalar=task)]

        toggled = await TeamService(db).toggle_shared_task(TEAM_ID, task.id, USER_ID)

        assert toggled.status == TaskStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_missing_shared_task(self):
        db = make_session()
        db.execute.side_effect = [make_result(scalar=_member()), make_result(scalar=None)]

        with pytest.raises(NotFoundError) as exc_info:
            await TeamService(db).delete_shared_task(TEAM_ID, uuid.uuid4(), USER_ID)

        assert exc_info.value.code == "TEAM_004"

    @pytest.mark.asyncio
    async def test_shared_expense_amount_is_validated(self):
        db = make_session()
        db.execute.return_value = make_result(scalar=_member())

        with pytest.raises(ValidationError) as exc_info:
            await TeamService(db).add_shared_expense(
                TEAM_ID,
                USER_ID,
                SharedExpenseCreate(amount="twelve", category="Groceries"),
            )

        assert exc_info.value.field == "amount"
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_team_adds_owner(self):
        db = make_session()

        team = await TeamService(db).create_team(USER_ID, TeamCreate(name="  Book club "))

        assert team.name == "Book club"
        owner = db.add.call_args_list[1].args[0]
        assert isinstance(owner, TeamMember)
        assert owner.role == TeamRole.OWNER
        assert owner.user_id == USER_ID
