"""
Vision Service
==============

Business logic for the future vision (one per user) and the life roadmap.
"""

from datetime import date
from typing import Optional, Union
import uuid

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, NotFoundError, ValidationError, VisionMissingError
from lifeos.models.vision import (
    MAX_HORIZON_YEARS,
    VISION_HORIZON_YEARS,
    FutureVision,
    RoadmapItem,
    RoadmapStatus,
)
from lifeos.schemas.vision import RoadmapItemCreate, VisionSave
from lifeos.utils.helpers import utc_now
from lifeos.utils.validators import validate_title


def split_values(raw: Union[str, list[str], None]) -> list[str]:
    """``"growth, family,, health"`` -> ``["growth", "family", "health"]``"""
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else raw
    return [v.strip() for v in items if v and v.strip()]


class VisionService:
    """Service for the future vision and roadmap."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Vision
    # =========================================================================

    async def get_vision(self, user_id: uuid.UUID) -> Optional[FutureVision]:
        result = await self.db.execute(
            select(FutureVision).where(FutureVision.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def require_vision(self, user_id: uuid.UUID) -> FutureVision:
        """The saved vision, or a relay error asking the user to write one."""
        vision = await self.get_vision(user_id)
        if vision is None or not vision.vision_text:
            raise VisionMissingError()
        return vision

    async def save_vision(self, user_id: uuid.UUID, data: VisionSave, today: date) -> FutureVision:
        """Create or replace the caller's vision."""
        vision_text = data.vision_text.strip()
        if not vision_text:
            raise ValidationError(message="Please describe your future vision", field="vision_text")

        target_year = data.target_year or today.year + VISION_HORIZON_YEARS
        if not today.year <= target_year <= today.year + MAX_HORIZON_YEARS:
            raise ValidationError(
                message=f"Target year must be between {today.year} and {today.year + MAX_HORIZON_YEARS}",
                field="target_year",
            )

        stmt = pg_insert(FutureVision).values(
            id=uuid.uuid4(),
            user_id=user_id,
            vision_text=vision_text,
            values=split_values(data.values),
            ideal_routines=data.ideal_routines,
            target_year=target_year,
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_future_vision_user",
            set_={
                "vision_text": stmt.excluded.vision_text,
                "values": stmt.excluded["values"],
                "ideal_routines": stmt.excluded.ideal_routines,
                "target_year": stmt.excluded.target_year,
                "updated_at": utc_now(),
            },
        ).returning(FutureVision.id)

        result = await self.db.execute(stmt)
        vision_id = result.scalar_one()

        return await self.db.get(FutureVision, vision_id, populate_existing=True)

    # =========================================================================
    # Roadmap
    # =========================================================================

    async def get_item(self, item_id: uuid.UUID, user_id: uuid.UUID) -> RoadmapItem:
        result = await self.db.execute(
            select(RoadmapItem).where(RoadmapItem.id == item_id, RoadmapItem.user_id == user_id)
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise NotFoundError(code=ErrorCodes.ROADMAP_ITEM_NOT_FOUND, message="Roadmap item not found")
        return item

    async def list_roadmap(self, user_id: uuid.UUID) -> list[RoadmapItem]:
        result = await self.db.execute(
            select(RoadmapItem)
            .where(RoadmapItem.user_id == user_id)
            .order_by(RoadmapItem.target_date.asc())
        )
        return list(result.scalars().all())

    async def add_item(self, user_id: uuid.UUID, data: RoadmapItemCreate) -> RoadmapItem:
        """New items always start as planned."""
        item = RoadmapItem(
            user_id=user_id,
            title=validate_title(data.title),
            description=(data.description or "").strip() or None,
            target_date=data.target_date,
            item_type=data.item_type.value,
            category=data.category.value,
            status=RoadmapStatus.PLANNED.value,
        )
        self.db.add(item)
        await self.db.flush()
        await self.db.refresh(item)
        return item

    async def set_status(self, item_id: uuid.UUID, user_id: uuid.UUID, new_status: RoadmapStatus) -> RoadmapItem:
        item = await self.get_item(item_id, user_id)
        item.status = new_status.value
        await self.db.flush()
        await self.db.refresh(item)
        return item

    async def delete_item(self, item_id: uuid.UUID, user_id: uuid.UUID) -> None:
        item = await self.get_item(item_id, user_id)
        await self.db.delete(item)
        await self.db.flush()
