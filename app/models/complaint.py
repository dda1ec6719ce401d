"""Domain 3: Complaint Model"""

from sqlalchemy import Column, DateTime, Numeric, String, Text, Boolean, Integer, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel, pg_enum
from app.models.enums import ComplaintStatus, ComplaintCategory


class Complaint(BaseModel):
    """
    Resident-submitted issue ticket.

    A resolved complaint may carry a charge. While ``added_to_bill`` is False
    and the charge is positive, the charge waits for the next bill run.
    """
    __tablename__ = "complaints"

    complaint_number = Column(String(20), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(pg_enum(ComplaintCategory, "complaint_category"), nullable=False)
    image_url = Column(String(1000), nullable=True)
    status = Column(
        pg_enum(ComplaintStatus, "complaint_status"),
        default=ComplaintStatus.PENDING,
        nullable=False,
        index=True,
    )

    resident_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resident_name = Column(String(255), nullable=False)
    house_no = Column(String(50), nullable=False, default="")

    # Resolution
    resolution_notes = Column(Text, nullable=True)
    resolved_by = Column(UUID(as_uuid=True), nullable=True)
    resolved_at = Column(DateTime, nullable=True)

    # Billing linkage
    charge_amount = Column(Numeric(12, 2), nullable=True)
    added_to_bill = Column(Boolean, default=False, nullable=False, index=True)
    bill_id = Column(UUID(as_uuid=True), ForeignKey("bills.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    resident = relationship("User", back_populates="complaints")
    bill = relationship("Bill", back_populates="complaints")

    @property
    def is_pending_billing(self) -> bool:
        """Charged but not yet folded into a bill"""
        return bool(self.charge_amount and self.charge_amount > 0 and not self.added_to_bill)

    def __repr__(self) -> str:
        return f"<Complaint {self.complaint_number} - {self.status}>"


class Counter(Base):
    """Named sequence backing human-readable numbers (complaints: C001, C002, ...)."""
    __tablename__ = "counters"

    name = Column(String(50), primary_key=True)
    count = Column(Integer, nullable=False, default=0)
