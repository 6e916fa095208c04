"""
Automation API Endpoints
========================

Automation rules, life templates and auto-generated follow-up tasks.
"""

import uuid

from fastapi import APIRouter, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.automation import AutomationRuleCreate, GeneratedTasks, TemplateApplyResult
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.services.automation_service import AutomationService
from lifeos.services.cache import CacheInvalidator

router = APIRouter()

NO_SUGGESTIONS_MESSAGE = "No tasks to generate from your recent activity"


# =============================================================================
# Rules
# =============================================================================

@router.get(
    "/rules",
    response_model=BaseResponse[list[dict]],
)
async def list_rules(
    current_user: CurrentUser,
    db: DBSession,
):
    rules = await AutomationService(db).list_rules(current_user.user_id)
    return BaseResponse(data=[r.to_api_dict() for r in rules])


@router.post(
    "/rules",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def create_rule(
    rule_data: AutomationRuleCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    rule = await AutomationService(db).create_rule(current_user.user_id, rule_data)
    return BaseResponse(data=rule.to_api_dict(), message="Automation rule created!")


@router.patch(
    "/rules/{rule_id}/toggle",
    response_model=BaseResponse[dict],
)
async def toggle_rule(
    rule_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    rule = await AutomationService(db).toggle_rule(rule_id, current_user.user_id)
    return BaseResponse(
        data=rule.to_api_dict(),
        message="Rule activated" if rule.is_active else "Rule paused",
    )


@router.delete(
    "/rules/{rule_id}",
    response_model=DeleteResponse,
)
async def delete_rule(
    rule_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await AutomationService(db).delete_rule(rule_id, current_user.user_id)
    return DeleteResponse(message="Rule deleted")


# =============================================================================
# Templates
# =============================================================================

@router.get(
    "/templates",
    response_model=BaseResponse[list[dict]],
)
async def list_templates(
    current_user: CurrentUser,
    db: DBSession,
):
    """System templates first, then your own."""
    templates = await AutomationService(db).list_templates(current_user.user_id)
    return BaseResponse(data=[t.to_api_dict() for t in templates])


@router.post(
    "/templates/{template_id}/apply",
    response_model=BaseResponse[TemplateApplyResult],
)
async def apply_template(
    template_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Apply a template.

    - `morning_routine`: one daily habit per entry in `template_data.habits`
    - `weekly_review`: one Personal task per entry in `template_data.tasks`
    - anything else only returns a message
    """
    result = await AutomationService(db).apply_template(template_id, current_user.user_id)
    if result["habits"] or result["tasks"]:
        await db.commit()
        await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return BaseResponse(data=TemplateApplyResult(**result), message=result["message"])


# =============================================================================
# Generated tasks
# =============================================================================

@router.post(
    "/generate-tasks",
    response_model=BaseResponse[GeneratedTasks],
)
async def generate_tasks(
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Create up to three pending tasks from pending decisions, in-progress
    learning goals and reflections that mention a plan ("want to",
    "should").
    """
    tasks = await AutomationService(db).generate_tasks(current_user.user_id)
    if not tasks:
        return BaseResponse(data=GeneratedTasks(count=0, tasks=[]), message=NO_SUGGESTIONS_MESSAGE)

    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return BaseResponse(
        data=GeneratedTasks(count=len(tasks), tasks=tasks),
        message=f"Created {len(tasks)} auto-generated tasks!",
    )
