from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from uuid import UUID
from datetime import datetime

from app.models.enums import GateVehicleType, RegisteredVehicleType
from app.utils.time import normalize_timestamp


def normalize_vehicle_number(vehicle_no: str) -> str:
    """Upper-cased and trimmed, so "lea 1234 " and "LEA 1234" match."""
    return (vehicle_no or "").strip().upper()


def _required_vehicle_number(v: str) -> str:
    normalized = normalize_vehicle_number(v)
    if not normalized:
        raise ValueError("Vehicle number is required")
    return normalized


class VehicleRegister(BaseModel):
    vehicle_no: str = Field(..., max_length=20)
    type: RegisteredVehicleType = RegisteredVehicleType.CAR
    color: Optional[str] = Field(None, max_length=50)
    image_url: Optional[str] = Field(None, max_length=1000)

    @field_validator("vehicle_no")
    @classmethod
    def validate_vehicle_no(cls, v: str) -> str:
        return _required_vehicle_number(v)


class VehicleUpdate(BaseModel):
    """Only the fields that are set change."""
    vehicle_no: Optional[str] = Field(None, max_length=20)
    type: Optional[RegisteredVehicleType] = None
    color: Optional[str] = Field(None, max_length=50)
    image_url: Optional[str] = Field(None, max_length=1000)

    @field_validator("vehicle_no")
    @classmethod
    def validate_vehicle_no(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_vehicle_number(v)


class RegisteredVehicleResponse(BaseModel):
    id: UUID
    vehicle_no: str
    type: RegisteredVehicleType
    color: Optional[str] = None
    image_url: Optional[str] = None
    resident_id: UUID
    resident_name: str
    house_no: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VehicleEntryCreate(BaseModel):
    """
    A vehicle arriving at the gate.

    Resident vehicles name the resident; visitor and service vehicles name
    the driver or company instead.
    """
    vehicle_no: str = Field(..., max_length=20)
    type: GateVehicleType
    resident_id: Optional[UUID] = None
    house_no: Optional[str] = Field(None, max_length=50)
    visitor_name: Optional[str] = Field(None, max_length=255)
    purpose: Optional[str] = None

    @field_validator("vehicle_no")
    @classmethod
    def validate_vehicle_no(cls, v: str) -> str:
        return _required_vehicle_number(v)

    @model_validator(mode="after")
    def check_who(self) -> "VehicleEntryCreate":
        if self.type == GateVehicleType.RESIDENT:
            if self.resident_id is None and not (self.house_no or "").strip():
                raise ValueError("Resident vehicles need a resident or house number")
        elif not (self.visitor_name or "").strip():
            raise ValueError("Visitor name is required for visitor and service vehicles")
        return self


class VehicleLogResponse(BaseModel):
    id: UUID
    vehicle_no: str
    type: GateVehicleType
    entry_time: datetime
    exit_time: Optional[datetime] = None
    resident_id: Optional[UUID] = None
    resident_name: Optional[str] = None
    house_no: Optional[str] = None
    visitor_name: Optional[str] = None
    purpose: Optional[str] = None
    logged_by: Optional[UUID] = None
    logged_by_name: str

    model_config = ConfigDict(from_attributes=True)

    @field_validator("entry_time", "exit_time", mode="before")
    @classmethod
    def normalize_timestamps(cls, v):
        return normalize_timestamp(v)


class GateStats(BaseModel):
    """Gate activity since midnight UTC"""
    entries: int
    exits: int
    inside: int


class ResidentLookup(BaseModel):
    id: UUID
    name: str
    house_no: Optional[str] = None
    email: str

    model_config = ConfigDict(from_attributes=True)
