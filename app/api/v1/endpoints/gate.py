"""Gate Endpoints - vehicle entry and exit logging by security guards"""

from typing import Any, Dict, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.schemas.responses import SuccessResponse
from app.schemas.vehicle import (
    GateStats,
    RegisteredVehicleResponse,
    ResidentLookup,
    VehicleEntryCreate,
    VehicleLogResponse,
)
from app.services.user_service import UserService
from app.services.vehicle_log_service import VehicleLogService
from app.services.vehicle_service import VehicleService

router = APIRouter()


# Guard lookups

@router.get("/residents", response_model=SuccessResponse[ResidentLookup])
async def find_resident_by_house(
    house_no: str = Query(..., min_length=1, max_length=50),
    current_user: User = Depends(deps.require_security),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    resident = await UserService.get_resident_by_house(db, house_no)
    if not resident:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No resident at this house")
    return SuccessResponse(data=ResidentLookup.model_validate(resident))


@router.get("/vehicles/{vehicle_no}", response_model=SuccessResponse[RegisteredVehicleResponse])
async def find_registered_vehicle(
    vehicle_no: str,
    current_user: User = Depends(deps.require_security),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Registered owner of a plate, to prefill a resident entry."""
    vehicle = await VehicleService.get_vehicle_by_number(db, vehicle_no)
    if not vehicle:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle is not registered")
    return SuccessResponse(data=RegisteredVehicleResponse.model_validate(vehicle))


# Entry and exit

@router.post("/entries", response_model=SuccessResponse)
async def log_vehicle_entry(
    entry_in: VehicleEntryCreate,
    current_user: User = Depends(deps.require_security),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await VehicleLogService.log_entry(db, entry_in, current_user))


@router.post("/entries/{log_id}/exit", response_model=SuccessResponse)
async def log_vehicle_exit(
    log_id: UUID,
    current_user: User = Depends(deps.require_security),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await VehicleLogService.log_exit(db, log_id))


@router.get("/active", response_model=SuccessResponse[List[VehicleLogResponse]])
async def list_active_vehicles(
    current_user: User = Depends(deps.require_admin_or_security),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Vehicles that entered and have not left."""
    return SuccessResponse(data=await VehicleLogService.list_logs(db, active_only=True))


@router.get("/active/{vehicle_no}", response_model=SuccessResponse[VehicleLogResponse])
async def find_active_vehicle(
    vehicle_no: str,
    current_user: User = Depends(deps.require_security),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Open log for a plate, for processing its exit."""
    log = await VehicleLogService.find_active_vehicle(db, vehicle_no)
    if not log:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle is not inside")
    return SuccessResponse(data=VehicleLogResponse.model_validate(log))


# Log views

@router.get("/logs", response_model=SuccessResponse[List[VehicleLogResponse]])
async def list_vehicle_logs(
    resident_id: Optional[UUID] = None,
    current_user: User = Depends(deps.require_admin_or_security),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return SuccessResponse(data=await VehicleLogService.list_logs(db, resident_id=resident_id))


@router.get("/logs/by-house", response_model=SuccessResponse[Dict[str, List[VehicleLogResponse]]])
async def list_vehicle_logs_by_house(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return SuccessResponse(data=await VehicleLogService.logs_by_house(db))


@router.get("/stats/today", response_model=SuccessResponse[GateStats])
async def get_today_gate_stats(
    current_user: User = Depends(deps.require_admin_or_security),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return SuccessResponse(data=await VehicleLogService.today_stats(db))
