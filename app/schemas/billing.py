from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID
from datetime import datetime, date
from decimal import Decimal

from app.models.enums import BillStatus
from app.utils.time import BillingMonth, normalize_timestamp


def _check_month(value: str) -> str:
    return str(BillingMonth.parse(value))


class BillComplaintCharge(BaseModel):
    """Complaint charge line item embedded in a bill's breakdown."""
    complaint_id: UUID
    complaint_number: str
    description: str
    amount: Decimal

    model_config = ConfigDict(frozen=True)


class BillBreakdown(BaseModel):
    base_charges: Decimal
    complaint_charges: List[BillComplaintCharge] = []
    previous_dues: Decimal
    total: Decimal


class BillResponse(BaseModel):
    id: UUID
    resident_id: UUID
    resident_name: str
    house_no: str
    month: str
    breakdown: BillBreakdown
    amount: Decimal
    status: BillStatus
    due_date: date
    is_archived: bool
    proof_url: Optional[str] = None
    proof_uploaded_at: Optional[datetime] = None
    sent_by: Optional[UUID] = None
    sent_at: Optional[datetime] = None
    verified_by: Optional[UUID] = None
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator("proof_uploaded_at", "sent_at", "verified_at", "created_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, v):
        return normalize_timestamp(v)

    @classmethod
    def from_model(cls, bill) -> "BillResponse":
        return cls(
            id=bill.id,
            resident_id=bill.resident_id,
            resident_name=bill.resident_name,
            house_no=bill.house_no or "",
            month=bill.month,
            breakdown=BillBreakdown(
                base_charges=bill.base_charges,
                complaint_charges=bill.complaint_charges or [],
                previous_dues=bill.previous_dues,
                total=bill.amount,
            ),
            amount=bill.amount,
            status=bill.status,
            due_date=bill.due_date,
            is_archived=bill.is_archived,
            proof_url=bill.proof_url,
            proof_uploaded_at=bill.proof_uploaded_at,
            sent_by=bill.sent_by,
            sent_at=bill.sent_at,
            verified_by=bill.verified_by,
            verified_at=bill.verified_at,
            created_at=bill.created_at,
        )


class MonthlyBillsGenerate(BaseModel):
    """Bulk generation request for every resident."""
    month: str = Field(..., description="Billing month, YYYY-MM")
    base_charges: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str) -> str:
        return _check_month(v)


class SingleBillGenerate(BaseModel):
    """Draft bill for one resident."""
    resident_id: UUID
    month: str = Field(..., description="Billing month, YYYY-MM")
    base_charges: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str) -> str:
        return _check_month(v)


class MonthlyBillsResult(BaseModel):
    bills_created: int
    bills_skipped: int
    complaints_processed: int


class PaymentProofUpload(BaseModel):
    proof_url: str = Field(..., min_length=1, max_length=1000)
