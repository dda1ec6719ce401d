from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID
from datetime import datetime

from app.models.enums import AnnouncementPriority
from app.utils.time import normalize_timestamp


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    priority: AnnouncementPriority = AnnouncementPriority.MEDIUM
    image_urls: List[str] = Field(default_factory=list, max_length=10)

    @field_validator("title", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class AnnouncementResponse(BaseModel):
    id: UUID
    title: str
    message: str
    priority: AnnouncementPriority
    image_urls: List[str] = []
    created_by: Optional[UUID] = None
    created_by_name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_created_at(cls, v):
        return normalize_timestamp(v)
