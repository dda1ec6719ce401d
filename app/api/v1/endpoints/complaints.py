"""Complaint Endpoints"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.cache import DataCache
from app.models.enums import ComplaintStatus
from app.models.user import User
from app.schemas.complaint import (
    ComplaintCharge,
    ComplaintCreate,
    ComplaintResolve,
    ComplaintResponse,
    ComplaintStatusUpdate,
)
from app.schemas.responses import SuccessResponse
from app.services.complaint_service import ComplaintService

router = APIRouter()


@router.post("", response_model=SuccessResponse)
async def submit_complaint(
    complaint_in: ComplaintCreate,
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Submit a complaint. It gets the next sequential complaint number."""
    result = await ComplaintService.create_complaint(db, complaint_in, current_user)
    return deps.to_response(result)


@router.get("/me", response_model=SuccessResponse[List[ComplaintResponse]])
async def list_my_complaints(
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    complaints = await ComplaintService.list_complaints(db, resident_id=current_user.id, cache=cache)
    return SuccessResponse(data=complaints)


@router.get("", response_model=SuccessResponse[List[ComplaintResponse]])
async def list_complaints(
    status_filter: Optional[ComplaintStatus] = None,
    resident_id: Optional[UUID] = None,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    """All complaints, newest first. Admin only."""
    complaints = await ComplaintService.list_complaints(
        db, resident_id=resident_id, status=status_filter, cache=cache
    )
    return SuccessResponse(data=complaints)


@router.get("/pending", response_model=SuccessResponse[List[ComplaintResponse]])
async def list_pending_complaints(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    complaints = await ComplaintService.list_complaints(db, status=ComplaintStatus.PENDING, cache=cache)
    return SuccessResponse(data=complaints)


@router.get("/{complaint_id}", response_model=SuccessResponse[ComplaintResponse])
async def get_complaint(
    complaint_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    complaint = await ComplaintService.get_complaint_by_id(db, complaint_id)
    if not complaint or (not current_user.is_admin and complaint.resident_id != current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Complaint not found")
    return SuccessResponse(data=ComplaintResponse.model_validate(complaint))


@router.patch("/{complaint_id}/status", response_model=SuccessResponse)
async def update_complaint_status(
    complaint_id: UUID,
    body: ComplaintStatusUpdate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    result = await ComplaintService.update_complaint_status(
        db, complaint_id, body.status, actor_id=current_user.id, notes=body.notes
    )
    return deps.to_response(result)


@router.post("/{complaint_id}/resolve", response_model=SuccessResponse)
async def resolve_complaint(
    complaint_id: UUID,
    body: ComplaintResolve,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Resolve a complaint with an optional charge.

    The charge lands on the resident's current draft bill when there is one,
    otherwise on the next monthly bill.
    """
    complaint = await ComplaintService.get_complaint_by_id(db, complaint_id)
    if not complaint:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Complaint not found")

    result = await ComplaintService.resolve_complaint_with_charge(
        db,
        complaint_id,
        notes=body.notes,
        charge_amount=body.charge_amount,
        actor_id=current_user.id,
        resident_id=complaint.resident_id,
        resident_name=complaint.resident_name,
    )
    return deps.to_response(result)


@router.post("/{complaint_id}/charge", response_model=SuccessResponse)
async def add_complaint_charge(
    complaint_id: UUID,
    body: ComplaintCharge,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await ComplaintService.add_charge_to_complaint(db, complaint_id, body.amount))


@router.delete("/{complaint_id}/charge", response_model=SuccessResponse)
async def remove_complaint_charge(
    complaint_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await ComplaintService.remove_charge_from_complaint(db, complaint_id))
