"""Billing Endpoints - monthly runs, bill lifecycle and payment proofs"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.cache import DataCache
from app.models.enums import BillStatus
from app.models.user import User
from app.schemas.billing import (
    BillResponse,
    MonthlyBillsGenerate,
    MonthlyBillsResult,
    PaymentProofUpload,
    SingleBillGenerate,
)
from app.schemas.responses import SuccessResponse
from app.services.bill_service import BillService
from app.services.billing_service import MonthlyBillingService
from app.services.user_service import UserService

router = APIRouter()


# Admin: generation

@router.post("/generate", response_model=SuccessResponse[MonthlyBillsResult])
async def generate_monthly_bills(
    body: MonthlyBillsGenerate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Bill every active resident for a month.

    Residents who already have a bill for the month are skipped, so the run
    can be repeated safely. Unbilled complaint charges are folded in.
    """
    result = await MonthlyBillingService.generate_monthly_bills(
        db, body.month, body.base_charges, actor_id=current_user.id
    )
    return deps.to_response(result)


@router.post("/single", response_model=SuccessResponse)
async def generate_single_bill(
    body: SingleBillGenerate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Create a draft bill for one resident."""
    resident = await UserService.get_user_by_id(db, body.resident_id)
    if not resident or not resident.is_resident or resident.is_deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resident not found")

    result = await MonthlyBillingService.generate_single_bill(
        db,
        resident_id=resident.id,
        resident_name=resident.name,
        house_no=resident.house_no or "",
        month=body.month,
        base_charges=body.base_charges,
        actor_id=current_user.id,
    )
    return deps.to_response(result)


# Admin: listing and lifecycle

@router.get("", response_model=SuccessResponse[List[BillResponse]])
async def list_bills(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    include_drafts: bool = True,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    bills = await BillService.list_all_bills(db, include_drafts=include_drafts, month=month, cache=cache)
    return SuccessResponse(data=bills)


@router.get("/pending", response_model=SuccessResponse[List[BillResponse]])
async def list_pending_bills(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Bills with a payment proof waiting for verification."""
    return SuccessResponse(data=await BillService.list_pending_bills(db))


@router.post("/publish", response_model=SuccessResponse)
async def publish_draft_bills(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Send every draft bill to its resident."""
    return deps.to_response(await BillService.publish_all_drafts(db, actor_id=current_user.id))


@router.post("/archive", response_model=SuccessResponse)
async def archive_paid_bills(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await BillService.archive_paid_bills(db))


# Resident views

@router.get("/me", response_model=SuccessResponse[List[BillResponse]])
async def list_my_bills(
    include_archived: bool = False,
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    """Bills sent to the current resident, newest first."""
    bills = await BillService.list_resident_bills(
        db, current_user.id, include_archived=include_archived, cache=cache
    )
    return SuccessResponse(data=bills)


@router.get("/me/history", response_model=SuccessResponse[List[BillResponse]])
async def list_my_payment_history(
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return SuccessResponse(data=await BillService.list_resident_bill_history(db, current_user.id))


# Single bill

@router.get("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def get_bill(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Admins see any bill; residents only their own sent bills."""
    bill = await BillService.get_bill_by_id(db, bill_id)
    if not bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    if not current_user.is_admin:
        if bill.resident_id != current_user.id or bill.status == BillStatus.DRAFT:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
    return SuccessResponse(data=BillResponse.from_model(bill))


@router.post("/{bill_id}/send", response_model=SuccessResponse)
async def send_bill(
    bill_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await BillService.send_bill(db, bill_id, actor_id=current_user.id))


@router.post("/{bill_id}/proof", response_model=SuccessResponse)
async def upload_payment_proof(
    bill_id: UUID,
    body: PaymentProofUpload,
    current_user: User = Depends(deps.require_resident),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Attach a payment proof; the bill then waits for admin verification."""
    result = await BillService.upload_payment_proof(db, bill_id, current_user.id, body.proof_url)
    return deps.to_response(result)


@router.post("/{bill_id}/verify", response_model=SuccessResponse)
async def verify_payment(
    bill_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await BillService.verify_payment(db, bill_id, actor_id=current_user.id))


@router.post("/{bill_id}/reject", response_model=SuccessResponse)
async def reject_payment_proof(
    bill_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return deps.to_response(await BillService.reject_payment_proof(db, bill_id))
