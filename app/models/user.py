"""Domain 1: Users & Authentication Model"""

from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, SoftDeleteMixin, StatusMixin, pg_enum
from app.models.enums import UserRole


class User(BaseModel, SoftDeleteMixin, StatusMixin):
    """
    Unified user model for admins, residents and security guards.
    Residents form the billing population.
    """
    __tablename__ = "users"

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Personal Information
    name = Column(String(255), nullable=False)
    house_no = Column(String(50), nullable=True, index=True)
    cnic = Column(String(20), nullable=True)

    # Role & Permissions (RBAC)
    role = Column(pg_enum(UserRole, "user_role"), nullable=False, index=True)

    # Admin who created the account; empty for bootstrapped admins
    created_by = Column(UUID(as_uuid=True), nullable=True)

    # Relationships
    bills = relationship("Bill", back_populates="resident", foreign_keys="Bill.resident_id")
    complaints = relationship("Complaint", back_populates="resident")
    vehicles = relationship("RegisteredVehicle", back_populates="resident")

    @property
    def is_admin(self) -> bool:
        """Check if user is an administrator"""
        return self.role == UserRole.ADMIN

    @property
    def is_resident(self) -> bool:
        """Check if user is a resident"""
        return self.role == UserRole.RESIDENT

    @property
    def is_security(self) -> bool:
        """Check if user is a security guard"""
        return self.role == UserRole.SECURITY

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
