"""Domain 5: Announcement Model"""

from sqlalchemy import Column, String, Text, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID

from app.models.base import BaseModel, pg_enum
from app.models.enums import AnnouncementPriority


class Announcement(BaseModel):
    """Notice from the administration to every resident."""
    __tablename__ = "announcements"

    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(
        pg_enum(AnnouncementPriority, "announcement_priority"),
        default=AnnouncementPriority.MEDIUM,
        nullable=False,
    )
    image_urls = Column(JSON, nullable=False, default=list)

    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_by_name = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Announcement {self.title!r} ({self.priority})>"
