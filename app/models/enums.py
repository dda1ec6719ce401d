"""Centralized Enum Definitions"""

import enum


# Domain 1: Users & Authentication
class UserRole(str, enum.Enum):
    """User roles for RBAC"""
    ADMIN = "admin"
    RESIDENT = "resident"
    SECURITY = "security"


# Domain 2: Billing
class BillStatus(str, enum.Enum):
    """
    Bill lifecycle.

    Draft -> Unpaid (sent) -> Pending (proof uploaded) -> Paid (verified).
    A rejected proof moves Pending back to Unpaid.
    """
    DRAFT = "Draft"
    UNPAID = "Unpaid"
    PENDING = "Pending"
    PAID = "Paid"


# Statuses that still count as money owed
OUTSTANDING_BILL_STATUSES = (BillStatus.UNPAID, BillStatus.PENDING)


# Domain 3: Complaints
class ComplaintStatus(str, enum.Enum):
    """Complaint handling status"""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class ComplaintCategory(str, enum.Enum):
    """Complaint categories offered to residents"""
    WATER = "Water"
    ELECTRICITY = "Electricity"
    MAINTENANCE = "Maintenance"
    SECURITY = "Security"
    OTHER = "Other"


# Domain 4: Vehicles & Gate
class RegisteredVehicleType(str, enum.Enum):
    """Vehicles residents can register"""
    CAR = "Car"
    BIKE = "Bike"
    OTHER = "Other"


class GateVehicleType(str, enum.Enum):
    """Who a vehicle at the gate belongs to"""
    RESIDENT = "Resident"
    VISITOR = "Visitor"
    SERVICE = "Service"


# Domain 5: Announcements
class AnnouncementPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
