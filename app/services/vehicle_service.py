"""Vehicle Service - resident vehicle registration"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.cache import DataCache
from app.models.user import User
from app.models.vehicle import RegisteredVehicle
from app.schemas.responses import OperationResult, ErrorCode
from app.schemas.vehicle import (
    RegisteredVehicleResponse,
    VehicleRegister,
    VehicleUpdate,
    normalize_vehicle_number,
)

logger = logging.getLogger(__name__)


class VehicleService:
    """Service layer for registered vehicles"""

    @staticmethod
    async def get_vehicle_by_id(db: AsyncSession, vehicle_id: UUID) -> Optional[RegisteredVehicle]:
        result = await db.execute(select(RegisteredVehicle).where(RegisteredVehicle.id == vehicle_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_vehicle_by_number(db: AsyncSession, vehicle_no: str) -> Optional[RegisteredVehicle]:
        """Registered vehicle by plate, in any letter case."""
        normalized = normalize_vehicle_number(vehicle_no)
        if not normalized:
            return None
        result = await db.execute(
            select(RegisteredVehicle).where(RegisteredVehicle.vehicle_no == normalized)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _number_taken(
        db: AsyncSession, vehicle_no: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        existing = await VehicleService.get_vehicle_by_number(db, vehicle_no)
        return existing is not None and existing.id != exclude_id

    @staticmethod
    async def register_vehicle(
        db: AsyncSession,
        vehicle_in: VehicleRegister,
        resident: User,
    ) -> OperationResult:
        """Register a resident's vehicle; plate numbers are unique society-wide."""
        vehicle_no = normalize_vehicle_number(vehicle_in.vehicle_no)
        try:
            if await VehicleService._number_taken(db, vehicle_no):
                return OperationResult.fail(
                    f"Vehicle {vehicle_no} is already registered", ErrorCode.DUPLICATE
                )
            vehicle = RegisteredVehicle(
                vehicle_no=vehicle_no,
                type=vehicle_in.type,
                color=(vehicle_in.color or "").strip() or None,
                image_url=vehicle_in.image_url,
                resident_id=resident.id,
                resident_name=resident.name,
                house_no=resident.house_no or "",
            )
            db.add(vehicle)
            await db.commit()
            await db.refresh(vehicle)
            logger.info("Vehicle registered", extra={"vehicle_no": vehicle_no, "resident_id": str(resident.id)})
            return OperationResult.ok(
                f"Vehicle {vehicle_no} registered successfully",
                {"vehicle_id": str(vehicle.id)},
            )
        except Exception as exc:
            logger.exception("Error registering vehicle", extra={"vehicle_no": vehicle_no})
            await db.rollback()
            return OperationResult.fail(f"Failed to register vehicle: {exc}")

    @staticmethod
    async def update_vehicle(
        db: AsyncSession,
        vehicle_id: UUID,
        resident_id: UUID,
        updates: VehicleUpdate,
    ) -> OperationResult:
        """Owner-only edit. A new plate number is checked against every other vehicle."""
        try:
            vehicle = await VehicleService.get_vehicle_by_id(db, vehicle_id)
            if not vehicle or vehicle.resident_id != resident_id:
                return OperationResult.fail("Vehicle not found", ErrorCode.NOT_FOUND)

            if updates.vehicle_no is not None:
                vehicle_no = normalize_vehicle_number(updates.vehicle_no)
                if await VehicleService._number_taken(db, vehicle_no, exclude_id=vehicle.id):
                    return OperationResult.fail(
                        f"Vehicle {vehicle_no} is already registered", ErrorCode.DUPLICATE
                    )
                vehicle.vehicle_no = vehicle_no
            if updates.type is not None:
                vehicle.type = updates.type
            if updates.color is not None:
                vehicle.color = updates.color.strip() or None
            if updates.image_url is not None:
                vehicle.image_url = updates.image_url

            await db.commit()
            return OperationResult.ok("Vehicle updated successfully", {"vehicle_id": str(vehicle.id)})
        except Exception as exc:
            logger.exception("Error updating vehicle", extra={"vehicle_id": str(vehicle_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to update vehicle: {exc}")

    @staticmethod
    async def delete_vehicle(db: AsyncSession, vehicle_id: UUID, resident_id: UUID) -> OperationResult:
        try:
            vehicle = await VehicleService.get_vehicle_by_id(db, vehicle_id)
            if not vehicle or vehicle.resident_id != resident_id:
                return OperationResult.fail("Vehicle not found", ErrorCode.NOT_FOUND)
            await db.delete(vehicle)
            await db.commit()
            return OperationResult.ok("Vehicle deleted successfully")
        except Exception as exc:
            logger.exception("Error deleting vehicle", extra={"vehicle_id": str(vehicle_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to delete vehicle: {exc}")

    @staticmethod
    async def list_vehicles(
        db: AsyncSession,
        resident_id: Optional[UUID] = None,
        cache: Optional[DataCache] = None,
    ) -> List[RegisteredVehicleResponse]:
        """Registered vehicles newest first, optionally for one resident."""
        cache_key = f"registered_vehicles:list:{resident_id or 'all'}"
        if cache is not None:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        query = select(RegisteredVehicle)
        if resident_id is not None:
            query = query.where(RegisteredVehicle.resident_id == resident_id)
        result = await db.execute(query.order_by(RegisteredVehicle.created_at.desc()))
        vehicles = [RegisteredVehicleResponse.model_validate(v) for v in result.scalars().all()]

        if cache is not None:
            cache.set(cache_key, vehicles)
        return vehicles
