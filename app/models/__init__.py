"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, SoftDeleteMixin, StatusMixin
from app.models.enums import *
from app.models.user import User
from app.models.billing import Bill
from app.models.complaint import Complaint, Counter
from app.models.vehicle import RegisteredVehicle, VehicleLog
from app.models.announcement import Announcement


__all__ = [
    # Base classes
    "BaseModel",
    "SoftDeleteMixin",
    "StatusMixin",

    # Users
    "User",

    # Billing
    "Bill",

    # Complaints
    "Complaint",
    "Counter",

    # Vehicles
    "RegisteredVehicle",
    "VehicleLog",

    # Announcements
    "Announcement",
]
