"""Base Models and Mixins shared by every table"""

import uuid
from sqlalchemy import Column, DateTime, Boolean
from sqlalchemy.dialects.postgresql import UUID, ENUM

from app.database import Base
from app.utils.time import get_utc_now


def pg_enum(enum_cls, name: str) -> ENUM:
    """Postgres ENUM that stores member values ("In Progress") rather than names."""
    return ENUM(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


class BaseModel(Base):
    """
    Base model class with common fields for all models.

    Provides:
    - UUID primary key
    - created_at timestamp
    - updated_at timestamp
    """
    __abstract__ = True

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime, default=get_utc_now, nullable=False)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)


class SoftDeleteMixin:
    """
    Mixin for soft delete functionality.

    Provides:
    - deleted_at timestamp (NULL = active, NOT NULL = deleted)
    """
    deleted_at = Column(DateTime, nullable=True, index=True)

    def soft_delete(self):
        """Mark record as deleted without removing from database"""
        self.deleted_at = get_utc_now()

    @property
    def is_deleted(self) -> bool:
        """Check if record is soft-deleted"""
        return self.deleted_at is not None


class StatusMixin:
    """
    Mixin for models with active/inactive status.

    Provides:
    - is_active boolean flag
    """
    is_active = Column(Boolean, default=True, nullable=False, index=True)
