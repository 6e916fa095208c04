"""
Team Service
============

Teams, memberships and team-scoped tasks and expenses.

Every team-scoped read or write first checks that the caller is a member
of the team; non-members get a 403 regardless of whether the team exists.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, ForbiddenError, NotFoundError
from lifeos.models.task import TaskStatus
from lifeos.models.team import SharedExpense, SharedTask, Team, TeamMember, TeamRole
from lifeos.schemas.task import SharedTaskCreate
from lifeos.schemas.team import SharedExpenseCreate, TeamCreate
from lifeos.utils.validators import parse_amount, validate_title

logger = logging.getLogger(__name__)


class TeamService:
    """Service for team operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Membership
    # =========================================================================

    async def get_membership(self, team_id: uuid.UUID, user_id: uuid.UUID) -> TeamMember:
        """Raise ForbiddenError unless ``user_id`` belongs to the team."""
        result = await self.db.execute(
            select(TeamMember).where(
                TeamMember.team_id == team_id,
                TeamMember.user_id == user_id,
            )
        )
        member = result.scalar_one_or_none()
        if member is None:
            raise ForbiddenError(
                code=ErrorCodes.TEAM_NOT_MEMBER,
                message="You are not a member of this team",
            )
        return member

    async def create_team(self, user_id: uuid.UUID, data: TeamCreate) -> Team:
        """Create a team; the creator joins as owner."""
        team = Team(
            name=validate_title(data.name, field="name"),
            description=(data.description or "").strip() or None,
            created_by=user_id,
        )
        self.db.add(team)
        await self.db.flush()

        self.db.add(TeamMember(team_id=team.id, user_id=user_id, role=TeamRole.OWNER))
        await self.db.flush()
        await self.db.refresh(team)

        logger.info("Team %s created by %s", team.id, user_id)
        return team

    async def join_team(self, user_id: uuid.UUID, invite_code: str) -> tuple[Team, bool]:
        """
        Join by invite code.

        Returns:
            (team, already_member); joining a team twice is not an error
        """
        code = invite_code.strip().lower()
        result = await self.db.execute(select(Team).where(Team.invite_code == code))
        team = result.scalar_one_or_none()
        if team is None:
            raise NotFoundError(
                code=ErrorCodes.TEAM_INVALID_INVITE,
                message="No team found with this invite code",
            )

        existing = await self.db.execute(
            select(TeamMember.id).where(
                TeamMember.team_id == team.id,
                TeamMember.user_id == user_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            return team, True

        try:
            async with self.db.begin_nested():
                self.db.add(TeamMember(team_id=team.id, user_id=user_id, role=TeamRole.MEMBER))
        except IntegrityError:
            return team, True

        logger.info("User %s joined team %s", user_id, team.id)
        return team, False

    async def leave_team(self, team_id: uuid.UUID, user_id: uuid.UUID) -> None:
        member = await self.get_membership(team_id, user_id)
        await self.db.delete(member)
        await self.db.flush()

    async def list_my_teams(self, user_id: uuid.UUID) -> list[Team]:
        result = await self.db.execute(
            select(Team)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .where(TeamMember.user_id == user_id)
            .order_by(Team.created_at.desc())
        )
        return list(result.scalars().all())

    async def team_detail(self, team_id: uuid.UUID, user_id: uuid.UUID) -> dict:
        """Team with members, shared tasks, shared expenses and their total."""
        membership = await self.get_membership(team_id, user_id)

        team = await self.db.get(Team, team_id)
        if team is None:
            raise NotFoundError(code=ErrorCodes.TEAM_NOT_FOUND, message="Team not found")

        members = await self.db.execute(
            select(TeamMember)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.created_at.asc())
        )
        tasks = await self.db.execute(
            select(SharedTask)
            .where(SharedTask.team_id == team_id)
            .order_by(SharedTask.created_at.desc())
        )
        expenses = list((await self.db.execute(
            select(SharedExpense)
            .where(SharedExpense.team_id == team_id)
            .order_by(SharedExpense.created_at.desc())
        )).scalars().all())

        return {
            **team.to_api_dict(),
            "my_role": TeamRole(membership.role).value,
            "members": [m.to_api_dict() for m in members.scalars().all()],
            "shared_tasks": [t.to_api_dict() for t in tasks.scalars().all()],
            "shared_expenses": [e.to_api_dict() for e in expenses],
            "total_expenses": round(sum(float(e.amount) for e in expenses), 2),
        }

    # =========================================================================
    # Shared tasks
    # =========================================================================

    async def _get_shared_task(self, team_id: uuid.UUID, task_id: uuid.UUID) -> SharedTask:
        result = await self.db.execute(
            select(SharedTask).where(SharedTask.id == task_id, SharedTask.team_id == team_id)
        )
        task = result.scalar_one_or_none()
        if task is None:
            raise NotFoundError(code=ErrorCodes.TEAM_ITEM_NOT_FOUND, message="Shared task not found")
        return task

    async def add_shared_task(self, team_id: uuid.UUID, user_id: uuid.UUID, data: SharedTaskCreate) -> SharedTask:
        await self.get_membership(team_id, user_id)
        task = SharedTask(
            team_id=team_id,
            title=validate_title(data.title),
            status=TaskStatus.PENDING,
            created_by=user_id,
            assigned_to=data.assigned_to,
        )
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def toggle_shared_task(self, team_id: uuid.UUID, task_id: uuid.UUID, user_id: uuid.UUID) -> SharedTask:
        await self.get_membership(team_id, user_id)
        task = await self._get_shared_task(team_id, task_id)
        task.status = TaskStatus(task.status).toggled()
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def delete_shared_task(self, team_id: uuid.UUID, task_id: uuid.UUID, user_id: uuid.UUID) -> None:
        await self.get_membership(team_id, user_id)
        task = await self._get_shared_task(team_id, task_id)
        await self.db.delete(task)
        await self.db.flush()

    # =========================================================================
    # Shared expenses
    # =========================================================================

    async def add_shared_expense(
        self,
        team_id: uuid.UUID,
        user_id: uuid.UUID,
        data: SharedExpenseCreate,
    ) -> SharedExpense:
        await self.get_membership(team_id, user_id)
        expense = SharedExpense(
            team_id=team_id,
            amount=parse_amount(data.amount),
            category=validate_title(data.category, field="category"),
            note=(data.note or "").strip() or None,
            paid_by=user_id,
        )
        self.db.add(expense)
        await self.db.flush()
        await self.db.refresh(expense)
        return expense

    async def delete_shared_expense(self, team_id: uuid.UUID, expense_id: uuid.UUID, user_id: uuid.UUID) -> None:
        await self.get_membership(team_id, user_id)
        result = await self.db.execute(
            select(SharedExpense).where(
                SharedExpense.id == expense_id,
                SharedExpense.team_id == team_id,
            )
        )
        expense = result.scalar_one_or_none()
        if expense is None:
            raise NotFoundError(code=ErrorCodes.TEAM_ITEM_NOT_FOUND, message="Shared expense not found")
        await self.db.delete(expense)
        await self.db.flush()
