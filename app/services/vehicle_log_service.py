"""Vehicle Log Service - gate entries and exits recorded by security guards"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Optional, List
from uuid import UUID
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.models.enums import GateVehicleType
from app.models.user import User
from app.models.vehicle import VehicleLog
from app.schemas.responses import OperationResult, ErrorCode
from app.schemas.vehicle import VehicleEntryCreate, VehicleLogResponse, normalize_vehicle_number
from app.services.user_service import UserService
from app.utils.time import get_utc_now

logger = logging.getLogger(__name__)


class VehicleLogService:
    """
    Gate log.

    A vehicle is inside while its latest log has no exit time. Entry is
    refused for a vehicle already inside, so each plate has at most one open
    log.
    """

    @staticmethod
    async def get_log_by_id(db: AsyncSession, log_id: UUID) -> Optional[VehicleLog]:
        result = await db.execute(select(VehicleLog).where(VehicleLog.id == log_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def find_active_vehicle(db: AsyncSession, vehicle_no: str) -> Optional[VehicleLog]:
        """The open log for a plate, if the vehicle is inside."""
        normalized = normalize_vehicle_number(vehicle_no)
        if not normalized:
            return None
        result = await db.execute(
            select(VehicleLog)
            .where(VehicleLog.vehicle_no == normalized, VehicleLog.exit_time.is_(None))
            .order_by(VehicleLog.entry_time.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def log_entry(
        db: AsyncSession,
        entry_in: VehicleEntryCreate,
        guard: User,
    ) -> OperationResult:
        """
        Record a vehicle entering.

        Resident vehicles are tied to a resident, found by id or by house
        number. Visitor and service vehicles keep the driver's name and purpose.
        """
        vehicle_no = normalize_vehicle_number(entry_in.vehicle_no)
        try:
            if await VehicleLogService.find_active_vehicle(db, vehicle_no):
                return OperationResult.fail(
                    f"Vehicle {vehicle_no} is already inside", ErrorCode.CONFLICT
                )

            log = VehicleLog(
                vehicle_no=vehicle_no,
                type=entry_in.type,
                entry_time=get_utc_now(),
                exit_time=None,
                visitor_name=(entry_in.visitor_name or "").strip() or None,
                purpose=(entry_in.purpose or "").strip() or None,
                logged_by=guard.id,
                logged_by_name=guard.name,
            )

            resident = None
            if entry_in.resident_id is not None:
                resident = await UserService.get_user_by_id(db, entry_in.resident_id)
                if resident is not None and not resident.is_resident:
                    resident = None
            elif entry_in.house_no:
                resident = await UserService.get_resident_by_house(db, entry_in.house_no)

            if entry_in.type == GateVehicleType.RESIDENT and resident is None:
                return OperationResult.fail("Resident not found", ErrorCode.NOT_FOUND)
            if resident is not None:
                log.resident_id = resident.id
                log.resident_name = resident.name
                log.house_no = resident.house_no
            elif entry_in.house_no:
                # Visitor headed to a house nobody is registered at
                log.house_no = entry_in.house_no.strip().upper()

            db.add(log)
            await db.commit()
            await db.refresh(log)
            logger.info(
                "Vehicle entry logged",
                extra={"vehicle_no": vehicle_no, "type": entry_in.type.value, "guard_id": str(guard.id)},
            )
            return OperationResult.ok(
                "Vehicle entry logged successfully",
                {"log_id": str(log.id)},
            )
        except Exception as exc:
            logger.exception("Error logging vehicle entry", extra={"vehicle_no": vehicle_no})
            await db.rollback()
            return OperationResult.fail(f"Failed to log vehicle entry: {exc}")

    @staticmethod
    async def log_exit(db: AsyncSession, log_id: UUID) -> OperationResult:
        """Close an open log."""
        try:
            log = await VehicleLogService.get_log_by_id(db, log_id)
            if not log:
                return OperationResult.fail("Vehicle log not found", ErrorCode.NOT_FOUND)
            if log.exit_time is not None:
                return OperationResult.fail(
                    f"Vehicle {log.vehicle_no} has already exited", ErrorCode.CONFLICT
                )
            log.exit_time = get_utc_now()
            await db.commit()
            logger.info("Vehicle exit logged", extra={"vehicle_no": log.vehicle_no, "log_id": str(log.id)})
            return OperationResult.ok("Vehicle exit logged successfully", {"log_id": str(log.id)})
        except Exception as exc:
            logger.exception("Error logging vehicle exit", extra={"log_id": str(log_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to log vehicle exit: {exc}")

    @staticmethod
    async def list_logs(
        db: AsyncSession,
        resident_id: Optional[UUID] = None,
        active_only: bool = False,
    ) -> List[VehicleLogResponse]:
        """Logs newest entry first."""
        query = select(VehicleLog)
        if resident_id is not None:
            query = query.where(VehicleLog.resident_id == resident_id)
        if active_only:
            query = query.where(VehicleLog.exit_time.is_(None))
        result = await db.execute(query.order_by(VehicleLog.entry_time.desc()))
        return [VehicleLogResponse.model_validate(log) for log in result.scalars().all()]

    @staticmethod
    async def logs_by_house(db: AsyncSession) -> Dict[str, List[VehicleLogResponse]]:
        """Logs tied to a house, grouped by house number."""
        result = await db.execute(
            select(VehicleLog)
            .where(VehicleLog.house_no.is_not(None))
            .order_by(VehicleLog.house_no, VehicleLog.entry_time.desc())
        )
        grouped: Dict[str, List[VehicleLogResponse]] = defaultdict(list)
        for log in result.scalars().all():
            grouped[log.house_no].append(VehicleLogResponse.model_validate(log))
        return dict(grouped)

    @staticmethod
    async def count_inside(db: AsyncSession) -> int:
        return await db.scalar(
            select(func.count(VehicleLog.id)).where(VehicleLog.exit_time.is_(None))
        ) or 0

    @staticmethod
    async def today_stats(db: AsyncSession, now: Optional[datetime] = None) -> Dict[str, int]:
        """Entries and exits since midnight UTC, and vehicles currently inside."""
        now = now or get_utc_now()
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        entries = await db.scalar(
            select(func.count(VehicleLog.id)).where(VehicleLog.entry_time >= midnight)
        )
        exits = await db.scalar(
            select(func.count(VehicleLog.id)).where(VehicleLog.exit_time >= midnight)
        )
        return {
            "entries": entries or 0,
            "exits": exits or 0,
            "inside": await VehicleLogService.count_inside(db),
        }
