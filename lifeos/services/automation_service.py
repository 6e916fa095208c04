"""
Automation Service
==================

Automation rules, life templates and tasks generated from recent activity.
"""

import logging
import re
import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, NotFoundError
from lifeos.models.automation import AutomationRule, LifeTemplate, TemplateCategory
from lifeos.models.decision import Decision
from lifeos.models.learning import GoalStatus, LearningGoal
from lifeos.models.wellness import Reflection
from lifeos.schemas.automation import AutomationRuleCreate
from lifeos.schemas.habit import HabitCreate
from lifeos.schemas.task import TaskCreate
from lifeos.services.habit_service import HabitService
from lifeos.services.insights import suggest_tasks
from lifeos.services.task_service import TaskService
from lifeos.utils.validators import validate_title

logger = logging.getLogger(__name__)

SOURCE_DECISION_LIMIT = 5
SOURCE_GOAL_LIMIT = 5
SOURCE_REFLECTION_LIMIT = 3

TEMPLATE_MESSAGES = {
    TemplateCategory.MORNING_ROUTINE: "Morning routine habits created!",
    TemplateCategory.WEEKLY_REVIEW: "Weekly review tasks created!",
    TemplateCategory.GOAL_SETTING: "Goal setting framework applied! Create goals in the Learning section.",
}
DEFAULT_TEMPLATE_MESSAGE = "Template applied!"


def habit_name_from(raw: str) -> str:
    """``"meditate"`` -> ``"Meditate"``"""
    return raw[:1].upper() + raw[1:]


def task_title_from(raw: str) -> str:
    """``"review_goals"`` -> ``"Review Goals"``"""
    return re.sub(r"\b\w", lambda m: m.group().upper(), raw.replace("_", " "))


def _names(data: dict, key: str) -> list[str]:
    values = data.get(key)
    if not isinstance(values, list):
        return []
    return [str(v) for v in values if str(v).strip()]


class AutomationService:
    """Service for automation rules and templates."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Rules
    # =========================================================================

    async def get_rule(self, rule_id: uuid.UUID, user_id: uuid.UUID) -> AutomationRule:
        result = await self.db.execute(
            select(AutomationRule).where(AutomationRule.id == rule_id, AutomationRule.user_id == user_id)
        )
        rule = result.scalar_one_or_none()
        if rule is None:
            raise NotFoundError(code=ErrorCodes.AUTOMATION_RULE_NOT_FOUND, message="Automation rule not found")
        return rule

    async def list_rules(self, user_id: uuid.UUID) -> list[AutomationRule]:
        result = await self.db.execute(
            select(AutomationRule)
            .where(AutomationRule.user_id == user_id)
            .order_by(AutomationRule.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_rule(self, user_id: uuid.UUID, data: AutomationRuleCreate) -> AutomationRule:
        rule = AutomationRule(
            user_id=user_id,
            name=validate_title(data.name, field="name"),
            trigger_type=data.trigger_type.value,
            trigger_config={},
            action_type=data.action_type.value,
            action_config={"value": data.action_value or ""},
            is_active=True,
        )
        self.db.add(rule)
        await self.db.flush()
        await self.db.refresh(rule)
        return rule

    async def toggle_rule(self, rule_id: uuid.UUID, user_id: uuid.UUID) -> AutomationRule:
        """Pause an active rule or resume a paused one."""
        rule = await self.get_rule(rule_id, user_id)
        rule.is_active = not rule.is_active
        await self.db.flush()
        await self.db.refresh(rule)
        return rule

    async def delete_rule(self, rule_id: uuid.UUID, user_id: uuid.UUID) -> None:
        rule = await self.get_rule(rule_id, user_id)
        await self.db.delete(rule)
        await self.db.flush()

    # =========================================================================
    # Templates
    # =========================================================================

    async def list_templates(self, user_id: uuid.UUID) -> list[LifeTemplate]:
        """System templates first, then the caller's own."""
        result = await self.db.execute(
            select(LifeTemplate)
            .where(or_(LifeTemplate.is_system.is_(True), LifeTemplate.user_id == user_id))
            .order_by(LifeTemplate.is_system.desc(), LifeTemplate.name.asc())
        )
        return list(result.scalars().all())

    async def get_template(self, template_id: uuid.UUID, user_id: uuid.UUID) -> LifeTemplate:
        result = await self.db.execute(
            select(LifeTemplate).where(
                LifeTemplate.id == template_id,
                or_(LifeTemplate.is_system.is_(True), LifeTemplate.user_id == user_id),
            )
        )
        template = result.scalar_one_or_none()
        if template is None:
            raise NotFoundError(code=ErrorCodes.TEMPLATE_NOT_FOUND, message="Template not found")
        return template

    async def apply_template(self, template_id: uuid.UUID, user_id: uuid.UUID) -> dict:
        """
        Create what the template describes.

        Morning routines add a daily habit per entry in ``habits``; weekly
        reviews add a Personal task per entry in ``tasks``. Other
        categories create nothing.
        """
        template = await self.get_template(template_id, user_id)
        data = template.template_data or {}
        habits, tasks = [], []
        message = DEFAULT_TEMPLATE_MESSAGE

        if template.category == TemplateCategory.MORNING_ROUTINE.value and isinstance(data.get("habits"), list):
            habit_service = HabitService(self.db)
            for raw in _names(data, "habits"):
                habit = await habit_service.create_habit(user_id, HabitCreate(name=habit_name_from(raw)[:100]))
                habits.append(habit.to_api_dict())
            message = TEMPLATE_MESSAGES[TemplateCategory.MORNING_ROUTINE]
        elif template.category == TemplateCategory.WEEKLY_REVIEW.value and isinstance(data.get("tasks"), list):
            task_service = TaskService(self.db)
            for raw in _names(data, "tasks"):
                task = await task_service.create_task(
                    user_id, TaskCreate(title=task_title_from(raw)[:200], category="Personal")
                )
                tasks.append(task.to_api_dict())
            message = TEMPLATE_MESSAGES[TemplateCategory.WEEKLY_REVIEW]
        elif template.category == TemplateCategory.GOAL_SETTING.value:
            message = TEMPLATE_MESSAGES[TemplateCategory.GOAL_SETTING]

        logger.info(
            "Template %s applied for user %s: %d habits, %d tasks",
            template.id, user_id, len(habits), len(tasks),
        )
        return {"message": message, "habits": habits, "tasks": tasks}

    # =========================================================================
    # Generated tasks
    # =========================================================================

    async def generate_tasks(self, user_id: uuid.UUID) -> list[dict]:
        """Create up to three follow-up tasks from recent decisions, goals and reflections."""
        decisions = await self.db.execute(
            select(Decision)
            .where(Decision.user_id == user_id)
            .order_by(Decision.created_at.desc())
            .limit(SOURCE_DECISION_LIMIT)
        )
        goals = await self.db.execute(
            select(LearningGoal)
            .where(LearningGoal.user_id == user_id, LearningGoal.status == GoalStatus.IN_PROGRESS)
            .limit(SOURCE_GOAL_LIMIT)
        )
        reflections = await self.db.execute(
            select(Reflection)
            .where(Reflection.user_id == user_id)
            .order_by(Reflection.created_at.desc())
            .limit(SOURCE_REFLECTION_LIMIT)
        )

        suggestions = suggest_tasks(
            decisions.scalars().all(),
            goals.scalars().all(),
            reflections.scalars().all(),
        )

        task_service = TaskService(self.db)
        created = []
        for suggestion in suggestions:
            task = await task_service.create_task(
                user_id, TaskCreate(title=suggestion["title"][:200], category=suggestion["category"])
            )
            created.append(task.to_api_dict())
        return created
