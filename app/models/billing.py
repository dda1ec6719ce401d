"""Domain 2: Billing Model"""

from sqlalchemy import Column, Date, DateTime, Numeric, String, Boolean, ForeignKey, Index, JSON, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, SoftDeleteMixin, pg_enum
from app.models.enums import BillStatus


class Bill(BaseModel, SoftDeleteMixin):
    """
    One resident's obligation for one calendar month.

    The breakdown (base charges, complaint charge line items, previous dues)
    always sums to ``amount``; call ``recalculate_total`` after touching it.
    """
    __tablename__ = "bills"
    __table_args__ = (
        # One live bill per resident per month
        Index(
            "uq_bills_resident_month_live",
            "resident_id",
            "month",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    resident_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resident_name = Column(String(255), nullable=False)
    house_no = Column(String(50), nullable=False, default="")
    month = Column(String(7), nullable=False, index=True)

    # Breakdown
    base_charges = Column(Numeric(12, 2), nullable=False, default=0)
    complaint_charges = Column(JSON, nullable=False, default=list)
    previous_dues = Column(Numeric(12, 2), nullable=False, default=0)

    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(pg_enum(BillStatus, "bill_status"), default=BillStatus.DRAFT, nullable=False, index=True)
    is_archived = Column(Boolean, default=False, nullable=False, index=True)

    # Audit trail
    sent_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    sent_at = Column(DateTime, nullable=True)
    proof_url = Column(String(1000), nullable=True)
    proof_uploaded_at = Column(DateTime, nullable=True)
    verified_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    verified_at = Column(DateTime, nullable=True)

    # Relationships
    resident = relationship("User", back_populates="bills", foreign_keys=[resident_id])
    complaints = relationship("Complaint", back_populates="bill")

    def recalculate_total(self) -> None:
        """Recompute ``amount`` from the breakdown."""
        from app.utils.billing import calculate_bill_total

        self.amount = calculate_bill_total(
            self.base_charges, self.complaint_charges or [], self.previous_dues
        )

    def add_complaint_charge(self, line: dict) -> None:
        """Append a complaint charge line item and refresh the total."""
        # Reassign so the JSON column registers the change
        self.complaint_charges = [*(self.complaint_charges or []), line]
        self.recalculate_total()

    def __repr__(self) -> str:
        return f"<Bill {self.month} {self.resident_name} {self.amount} - {self.status}>"
