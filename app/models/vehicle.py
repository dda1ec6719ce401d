"""Domain 4: Vehicle Registration and Gate Log Models"""

from sqlalchemy import Column, DateTime, String, Text, ForeignKey, Index, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, pg_enum
from app.models.enums import GateVehicleType, RegisteredVehicleType
from app.utils.time import get_utc_now


class RegisteredVehicle(BaseModel):
    """
    A resident's own vehicle.

    ``vehicle_no`` is stored upper-cased and trimmed, so uniqueness is
    case-insensitive.
    """
    __tablename__ = "registered_vehicles"

    vehicle_no = Column(String(20), unique=True, nullable=False, index=True)
    type = Column(pg_enum(RegisteredVehicleType, "registered_vehicle_type"), nullable=False)
    color = Column(String(50), nullable=True)
    image_url = Column(String(1000), nullable=True)

    resident_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resident_name = Column(String(255), nullable=False)
    house_no = Column(String(50), nullable=False, default="")

    resident = relationship("User", back_populates="vehicles")

    def __repr__(self) -> str:
        return f"<RegisteredVehicle {self.vehicle_no} ({self.house_no})>"


class VehicleLog(BaseModel):
    """
    One visit through the gate, logged by a security guard.

    ``exit_time`` stays empty while the vehicle is inside.
    """
    __tablename__ = "vehicle_logs"
    __table_args__ = (
        # A vehicle is inside at most once
        Index(
            "uq_vehicle_logs_inside",
            "vehicle_no",
            unique=True,
            postgresql_where=text("exit_time IS NULL"),
        ),
    )

    vehicle_no = Column(String(20), nullable=False, index=True)
    type = Column(pg_enum(GateVehicleType, "gate_vehicle_type"), nullable=False)
    entry_time = Column(DateTime, default=get_utc_now, nullable=False, index=True)
    exit_time = Column(DateTime, nullable=True)

    # Resident visits
    resident_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    resident_name = Column(String(255), nullable=True)
    house_no = Column(String(50), nullable=True, index=True)

    # Visitors and service vehicles
    visitor_name = Column(String(255), nullable=True)
    purpose = Column(Text, nullable=True)

    logged_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    logged_by_name = Column(String(255), nullable=False)

    @property
    def is_inside(self) -> bool:
        return self.exit_time is None

    def __repr__(self) -> str:
        return f"<VehicleLog {self.vehicle_no} in={self.entry_time} out={self.exit_time}>"
