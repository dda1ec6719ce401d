from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from app.models.enums import ComplaintCategory, ComplaintStatus
from app.utils.time import normalize_timestamp


class ComplaintCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: ComplaintCategory = ComplaintCategory.OTHER
    image_url: Optional[str] = Field(None, max_length=1000)


class ComplaintStatusUpdate(BaseModel):
    status: ComplaintStatus
    notes: Optional[str] = None


class ComplaintResolve(BaseModel):
    notes: Optional[str] = None
    charge_amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)


class ComplaintCharge(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class ComplaintResponse(BaseModel):
    id: UUID
    complaint_number: str
    title: str
    description: str
    category: ComplaintCategory
    image_url: Optional[str] = None
    status: ComplaintStatus
    resident_id: UUID
    resident_name: str
    house_no: str
    resolution_notes: Optional[str] = None
    resolved_by: Optional[UUID] = None
    resolved_at: Optional[datetime] = None
    charge_amount: Optional[Decimal] = None
    added_to_bill: bool
    bill_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("resolved_at", "created_at", "updated_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, v):
        return normalize_timestamp(v)
