"""Announcement Endpoints"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.cache import DataCache
from app.models.user import User
from app.schemas.announcement import AnnouncementCreate, AnnouncementResponse
from app.schemas.responses import SuccessResponse
from app.services.announcement_service import AnnouncementService

router = APIRouter()


@router.post("", response_model=SuccessResponse)
async def create_announcement(
    announcement_in: AnnouncementCreate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Post a notice to every resident."""
    result = await AnnouncementService.create_announcement(db, announcement_in, current_user)
    return deps.to_response(result)


@router.get("", response_model=SuccessResponse[List[AnnouncementResponse]])
async def list_announcements(
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    announcements = await AnnouncementService.list_announcements(db, limit=limit, cache=cache)
    return SuccessResponse(data=announcements)


@router.get("/recent", response_model=SuccessResponse[List[AnnouncementResponse]])
async def list_recent_announcements(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    """The ten newest announcements."""
    return SuccessResponse(data=await AnnouncementService.list_recent_announcements(db, cache=cache))
