"""Announcement Service - notices from the administration"""

from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.cache import DataCache
from app.models.announcement import Announcement
from app.models.user import User
from app.schemas.announcement import AnnouncementCreate, AnnouncementResponse
from app.schemas.responses import OperationResult

logger = logging.getLogger(__name__)

RECENT_ANNOUNCEMENTS = 10


class AnnouncementService:

    @staticmethod
    async def create_announcement(
        db: AsyncSession,
        announcement_in: AnnouncementCreate,
        admin: User,
    ) -> OperationResult:
        try:
            announcement = Announcement(
                title=announcement_in.title,
                message=announcement_in.message,
                priority=announcement_in.priority,
                image_urls=list(announcement_in.image_urls),
                created_by=admin.id,
                created_by_name=admin.name,
            )
            db.add(announcement)
            await db.commit()
            await db.refresh(announcement)
            logger.info(
                "Announcement created",
                extra={"announcement_id": str(announcement.id), "priority": announcement_in.priority.value},
            )
            return OperationResult.ok(
                "Announcement created successfully",
                {"announcement_id": str(announcement.id)},
            )
        except Exception as exc:
            logger.exception("Error creating announcement")
            await db.rollback()
            return OperationResult.fail(f"Failed to create announcement: {exc}")

    @staticmethod
    async def list_announcements(
        db: AsyncSession,
        limit: Optional[int] = None,
        cache: Optional[DataCache] = None,
    ) -> List[AnnouncementResponse]:
        """Newest first; ``limit`` caps the count."""
        cache_key = f"announcements:list:{limit or 'all'}"
        if cache is not None:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        query = select(Announcement).order_by(Announcement.created_at.desc())
        if limit:
            query = query.limit(limit)
        result = await db.execute(query)
        announcements = [AnnouncementResponse.model_validate(a) for a in result.scalars().all()]

        if cache is not None:
            cache.set(cache_key, announcements)
        return announcements

    @staticmethod
    async def list_recent_announcements(
        db: AsyncSession,
        cache: Optional[DataCache] = None,
    ) -> List[AnnouncementResponse]:
        return await AnnouncementService.list_announcements(db, limit=RECENT_ANNOUNCEMENTS, cache=cache)
