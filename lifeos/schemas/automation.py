"""
Automation Schemas
==================

Pydantic schemas for automation rules and life templates.
"""

from typing import Optional

from pydantic import BaseModel, Field

from lifeos.models.automation import ActionType, TriggerType


class AutomationRuleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    trigger_type: TriggerType
    action_type: ActionType
    action_value: Optional[str] = Field(default="", max_length=500)


class TemplateApplyResult(BaseModel):
    """What applying a template created."""

    message: str
    habits: list[dict] = []
    tasks: list[dict] = []


class GeneratedTasks(BaseModel):
    count: int
    tasks: list[dict]
