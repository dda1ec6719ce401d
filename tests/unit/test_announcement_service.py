"""Unit tests for AnnouncementService."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import DataCache
from app.models.enums import AnnouncementPriority, UserRole
from app.models.user import User
from app.schemas.announcement import AnnouncementCreate
from app.services.announcement_service import AnnouncementService


def make_db():
    db = AsyncMock(spec=AsyncSession)
    db.add = MagicMock()
    return db


def make_admin():
    return User(
        id=uuid4(),
        email="admin@society.test",
        hashed_password="x",
        name="Society Office",
        role=UserRole.ADMIN,
        is_active=True,
    )


def test_blank_announcement_rejected():
    with pytest.raises(ValidationError):
        AnnouncementCreate(title="   ", message="Water off on Sunday")


@pytest.mark.asyncio
async def test_create_records_author_and_priority():
    db = make_db()
    admin = make_admin()

    result = await AnnouncementService.create_announcement(
        db,
        AnnouncementCreate(
            title=" Water supply ",
            message="Tanks are cleaned on Sunday",
            priority=AnnouncementPriority.HIGH,
            image_urls=["https://files.example.com/notice.jpg"],
        ),
        admin,
    )

    assert result.success
    announcement = db.add.call_args[0][0]
    assert announcement.title == "Water supply"
    assert announcement.priority == AnnouncementPriority.HIGH
    assert announcement.created_by == admin.id
    assert announcement.created_by_name == "Society Office"
    assert announcement.image_urls == ["https://files.example.com/notice.jpg"]
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_failure_rolls_back():
    db = make_db()
    db.commit.side_effect = RuntimeError("disk full")

    result = await AnnouncementService.create_announcement(
        db, AnnouncementCreate(title="Notice", message="Body"), make_admin()
    )

    assert not result.success
    assert "disk full" in result.error
    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_recent_list_is_served_from_cache():
    db = make_db()
    cache = DataCache()
    cache.set("announcements:list:10", ["cached"])

    announcements = await AnnouncementService.list_recent_announcements(db, cache=cache)

    assert announcements == ["cached"]
    db.execute.assert_not_called()
