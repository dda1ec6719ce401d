"""Vehicle Endpoints - residents register their own vehicles"""

from typing import Any, List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.cache import DataCache
from app.models.user import User
from app.schemas.responses import SuccessResponse
from app.schemas.vehicle import (
    RegisteredVehicleResponse,
    VehicleLogResponse,
    VehicleRegister,
    VehicleUpdate,
)
from app.services.vehicle_log_service import VehicleLogService
from app.services.vehicle_service import VehicleService

router = APIRouter()


@router.post("", response_model=SuccessResponse)
async def register_vehicle(
    vehicle_in: VehicleRegister,
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Register a vehicle. Plate numbers are unique regardless of letter case."""
    return deps.to_response(await VehicleService.register_vehicle(db, vehicle_in, current_user))


@router.get("/me", response_model=SuccessResponse[List[RegisteredVehicleResponse]])
async def list_my_vehicles(
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    vehicles = await VehicleService.list_vehicles(db, resident_id=current_user.id, cache=cache)
    return SuccessResponse(data=vehicles)


@router.get("/me/logs", response_model=SuccessResponse[List[VehicleLogResponse]])
async def list_my_vehicle_logs(
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Gate entries and exits recorded against the current resident."""
    return SuccessResponse(data=await VehicleLogService.list_logs(db, resident_id=current_user.id))


@router.get("", response_model=SuccessResponse[List[RegisteredVehicleResponse]])
async def list_registered_vehicles(
    current_user: User = Depends(deps.require_admin_or_security),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    return SuccessResponse(data=await VehicleService.list_vehicles(db, cache=cache))


@router.patch("/{vehicle_id}", response_model=SuccessResponse)
async def update_vehicle(
    vehicle_id: UUID,
    updates: VehicleUpdate,
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    result = await VehicleService.update_vehicle(db, vehicle_id, current_user.id, updates)
    return deps.to_response(result)


@router.delete("/{vehicle_id}", response_model=SuccessResponse)
async def delete_vehicle(
    vehicle_id: UUID,
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await VehicleService.delete_vehicle(db, vehicle_id, current_user.id))
