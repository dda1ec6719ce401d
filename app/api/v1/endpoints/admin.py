from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.services.bill_service import BillService
from app.services.complaint_service import ComplaintService
from app.services.user_service import UserService
from app.services.vehicle_log_service import VehicleLogService
from app.schemas.responses import SuccessResponse

router = APIRouter()

@router.get("/stats", response_model=SuccessResponse)
async def get_admin_stats(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Dashboard counts: residents, bills per status, amount still owed,
    complaints per status and vehicles currently inside the gate.
    """
    bill_stats = await BillService.get_stats(db)
    stats = {
        "residents": await UserService.count_residents(db),
        "bills_by_status": bill_stats["bills_by_status"],
        "outstanding_amount": str(bill_stats["outstanding_amount"]),
        "complaints_by_status": await ComplaintService.count_by_status(db),
        "vehicles_inside": await VehicleLogService.count_inside(db),
    }
    return SuccessResponse(data=stats)
