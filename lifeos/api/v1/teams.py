"""
Teams API Endpoints
===================

Teams, invite-code joins, and team-scoped tasks and expenses.

Only members can see or change anything inside a team.
"""

import uuid

from fastapi import APIRouter, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.schemas.task import SharedTaskCreate
from lifeos.schemas.team import SharedExpenseCreate, TeamCreate, TeamJoin, TeamJoinResult
from lifeos.services.team_service import TeamService

router = APIRouter()


# =============================================================================
# Teams
# =============================================================================

@router.get(
    "",
    response_model=BaseResponse[list[dict]],
)
async def list_my_teams(
    current_user: CurrentUser,
    db: DBSession,
):
    teams = await TeamService(db).list_my_teams(current_user.user_id)
    return BaseResponse(data=[t.to_api_dict() for t in teams])


@router.post(
    "",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def create_team(
    team_data: TeamCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    """Create a team; the caller becomes its owner."""
    team = await TeamService(db).create_team(current_user.user_id, team_data)
    return BaseResponse(data=team.to_api_dict(), message=f"{team.name} is ready")


@router.post(
    "/join",
    response_model=BaseResponse[TeamJoinResult],
)
async def join_team(
    join_data: TeamJoin,
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Join by invite code (case-insensitive).

    Joining a team you already belong to succeeds with
    `already_member: true`.
    """
    team, already_member = await TeamService(db).join_team(current_user.user_id, join_data.invite_code)
    message = "You are already in this team" if already_member else f"Welcome to {team.name}"
    return BaseResponse(
        data=TeamJoinResult(team=team.to_api_dict(), already_member=already_member),
        message=message,
    )


@router.get(
    "/{team_id}",
    response_model=BaseResponse[dict],
)
async def get_team(
    team_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    """Members, shared tasks and shared expenses of a team."""
    detail = await TeamService(db).team_detail(team_id, current_user.user_id)
    return BaseResponse(data=detail)


@router.delete(
    "/{team_id}/membership",
    response_model=DeleteResponse,
)
async def leave_team(
    team_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await TeamService(db).leave_team(team_id, current_user.user_id)
    return DeleteResponse(message="Left team")


# =============================================================================
# Shared tasks
# =============================================================================

@router.post(
    "/{team_id}/tasks",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def add_shared_task(
    team_id: uuid.UUID,
    task_data: SharedTaskCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    task = await TeamService(db).add_shared_task(team_id, current_user.user_id, task_data)
    return BaseResponse(data=task.to_api_dict(), message="Task added")


@router.patch(
    "/{team_id}/tasks/{task_id}/toggle",
    response_model=BaseResponse[dict],
)
async def toggle_shared_task(
    team_id: uuid.UUID,
    task_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    task = await TeamService(db).toggle_shared_task(team_id, task_id, current_user.user_id)
    return BaseResponse(data=task.to_api_dict())


@router.delete(
    "/{team_id}/tasks/{task_id}",
    response_model=DeleteResponse,
)
async def delete_shared_task(
    team_id: uuid.UUID,
    task_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await TeamService(db).delete_shared_task(team_id, task_id, current_user.user_id)
    return DeleteResponse(message="Task deleted")


# =============================================================================
# Shared expenses
# =============================================================================

@router.post(
    "/{team_id}/expenses",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def add_shared_expense(
    team_id: uuid.UUID,
    expense_data: SharedExpenseCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    expense = await TeamService(db).add_shared_expense(team_id, current_user.user_id, expense_data)
    return BaseResponse(data=expense.to_api_dict(), message="Expense added")


@router.delete(
    "/{team_id}/expenses/{expense_id}",
    response_model=DeleteResponse,
)
async def delete_shared_expense(
    team_id: uuid.UUID,
    expense_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await TeamService(db).delete_shared_expense(team_id, expense_id, current_user.user_id)
    return DeleteResponse(message="Expense deleted")
