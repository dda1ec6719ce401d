"""Complaint Service - tickets, resolution and charge linkage"""

from decimal import Decimal
from typing import Dict, Optional, List
from uuid import UUID
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.config import settings
from app.core.cache import DataCache
from app.models.complaint import Complaint, Counter
from app.models.enums import BillStatus, ComplaintStatus
from app.models.user import User
from app.schemas.billing import BillComplaintCharge
from app.schemas.complaint import ComplaintCreate, ComplaintResponse
from app.schemas.responses import OperationResult, ErrorCode
from app.services.bill_service import BillService
from app.utils.billing import to_money
from app.utils.time import BillingMonth, get_utc_now

logger = logging.getLogger(__name__)

COMPLAINT_COUNTER = "complaints"

# Pending -> In Progress -> Resolved, never backwards
_STATUS_ORDER = {
    ComplaintStatus.PENDING: 0,
    ComplaintStatus.IN_PROGRESS: 1,
    ComplaintStatus.RESOLVED: 2,
}


class ComplaintService:
    """Service layer for complaint operations"""

    @staticmethod
    async def next_complaint_number(db: AsyncSession) -> str:
        """
        Reserve the next complaint number (C001, C002, ...).

        The counter row is locked until the caller's transaction ends.
        """
        result = await db.execute(
            select(Counter).where(Counter.name == COMPLAINT_COUNTER).with_for_update()
        )
        counter = result.scalar_one_or_none()
        if counter is None:
            counter = Counter(name=COMPLAINT_COUNTER, count=0)
            db.add(counter)
        counter.count += 1
        return f"{settings.COMPLAINT_NUMBER_PREFIX}{counter.count:03d}"

    @staticmethod
    async def create_complaint(
        db: AsyncSession,
        complaint_in: ComplaintCreate,
        resident: User,
    ) -> OperationResult:
        try:
            number = await ComplaintService.next_complaint_number(db)
            complaint = Complaint(
                complaint_number=number,
                title=complaint_in.title.strip(),
                description=complaint_in.description.strip(),
                category=complaint_in.category,
                image_url=complaint_in.image_url,
                status=ComplaintStatus.PENDING,
                resident_id=resident.id,
                resident_name=resident.name,
                house_no=resident.house_no or "",
                added_to_bill=False,
            )
            db.add(complaint)
            await db.commit()
            await db.refresh(complaint)
            logger.info("Complaint submitted", extra={"complaint_number": number})
            return OperationResult.ok(
                f"Complaint {number} submitted successfully",
                {"complaint_id": str(complaint.id), "complaint_number": number},
            )
        except Exception as exc:
            logger.exception("Error creating complaint")
            await db.rollback()
            return OperationResult.fail(f"Failed to submit complaint: {exc}")

    @staticmethod
    async def get_complaint_by_id(db: AsyncSession, complaint_id: UUID) -> Optional[Complaint]:
        result = await db.execute(select(Complaint).where(Complaint.id == complaint_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_unbilled_complaints(db: AsyncSession, resident_id: UUID) -> List[Complaint]:
        """Charged complaints not yet folded into any bill."""
        result = await db.execute(
            select(Complaint)
            .where(
                Complaint.resident_id == resident_id,
                Complaint.added_to_bill == False,
                Complaint.charge_amount > 0,
            )
            .order_by(Complaint.complaint_number)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_complaints(
        db: AsyncSession,
        resident_id: Optional[UUID] = None,
        status: Optional[ComplaintStatus] = None,
        cache: Optional[DataCache] = None,
    ) -> List[ComplaintResponse]:
        """Complaints newest first, optionally for one resident or one status."""
        cache_key = f"complaints:list:{resident_id or 'all'}:{status.value if status else '*'}"
        if cache is not None:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        query = select(Complaint)
        if resident_id is not None:
            query = query.where(Complaint.resident_id == resident_id)
        if status is not None:
            query = query.where(Complaint.status == status)
        result = await db.execute(query.order_by(Complaint.created_at.desc()))
        complaints = [ComplaintResponse.model_validate(c) for c in result.scalars().all()]

        if cache is not None:
            cache.set(cache_key, complaints)
        return complaints

    @staticmethod
    async def count_by_status(db: AsyncSession) -> Dict[str, int]:
        rows = await db.execute(
            select(Complaint.status, func.count(Complaint.id)).group_by(Complaint.status)
        )
        counts = {status.value: 0 for status in ComplaintStatus}
        for status, count in rows.all():
            counts[ComplaintStatus(status).value] = count
        return counts

    @staticmethod
    async def update_complaint_status(
        db: AsyncSession,
        complaint_id: UUID,
        status: ComplaintStatus,
        actor_id: UUID,
        notes: Optional[str] = None,
    ) -> OperationResult:
        try:
            complaint = await ComplaintService.get_complaint_by_id(db, complaint_id)
            if not complaint:
                return OperationResult.fail("Complaint not found", ErrorCode.NOT_FOUND)
            current = ComplaintStatus(complaint.status)
            if _STATUS_ORDER[status] < _STATUS_ORDER[current]:
                return OperationResult.fail(
                    f"Cannot move complaint from {current.value} back to {status.value}",
                    ErrorCode.CONFLICT,
                )
            complaint.status = status
            if notes:
                complaint.resolution_notes = notes
            if status == ComplaintStatus.RESOLVED and complaint.resolved_at is None:
                complaint.resolved_by = actor_id
                complaint.resolved_at = get_utc_now()
            await db.commit()
            return OperationResult.ok(f"Complaint marked as {status.value}")
        except Exception as exc:
            logger.exception("Error updating complaint status", extra={"complaint_id": str(complaint_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to update complaint status: {exc}")

    @staticmethod
    async def resolve_complaint_with_charge(
        db: AsyncSession,
        complaint_id: UUID,
        notes: Optional[str],
        charge_amount: Optional[Decimal],
        actor_id: UUID,
        resident_id: UUID,
        resident_name: str,
    ) -> OperationResult:
        """
        Resolve a complaint, optionally charging the resident.

        A positive charge goes straight onto the resident's current-month bill
        when that bill is still a draft. Otherwise it is stored unbilled and the
        next monthly run picks it up. Resolving without a charge marks the
        complaint as billed since there is nothing left to bill.
        """
        try:
            complaint = await ComplaintService.get_complaint_by_id(db, complaint_id)
            if not complaint:
                return OperationResult.fail("Complaint not found", ErrorCode.NOT_FOUND)
            if complaint.added_to_bill:
                return OperationResult.fail(
                    "Charge already added to bill for this complaint", ErrorCode.CONFLICT
                )
            if complaint.resident_id != resident_id:
                return OperationResult.fail(
                    f"Complaint {complaint.complaint_number} does not belong to {resident_name}",
                    ErrorCode.VALIDATION,
                )

            now = get_utc_now()
            complaint.status = ComplaintStatus.RESOLVED
            complaint.resolution_notes = notes or None
            complaint.resolved_by = actor_id
            complaint.resolved_at = now

            charge = to_money(charge_amount)
            if charge <= 0:
                complaint.charge_amount = to_money(0)
                complaint.added_to_bill = True
                complaint.bill_id = None
                await db.commit()
                return OperationResult.ok("Complaint resolved successfully.")

            complaint.charge_amount = charge
            month = str(BillingMonth.current(now))
            current_bill = await BillService.get_bill_for_month(db, resident_id, month)

            if current_bill is not None and current_bill.status == BillStatus.DRAFT:
                added = await BillService.add_complaint_charge(
                    db,
                    current_bill.id,
                    BillComplaintCharge(
                        complaint_id=complaint.id,
                        complaint_number=complaint.complaint_number,
                        description=complaint.title,
                        amount=charge,
                    ),
                    auto_commit=False,
                )
                if not added.success:
                    await db.rollback()
                    return OperationResult.fail(
                        added.error or "Failed to add charge to bill", added.code or ErrorCode.FAILED
                    )
                complaint.added_to_bill = True
                complaint.bill_id = current_bill.id
                await db.commit()
                logger.info(
                    "Complaint charge added to draft bill",
                    extra={"complaint_id": str(complaint.id), "bill_id": str(current_bill.id)},
                )
                return OperationResult.ok(
                    f"Complaint resolved. Rs. {charge:,} added to current bill.",
                    {"bill_id": str(current_bill.id)},
                )

            complaint.added_to_bill = False
            complaint.bill_id = None
            await db.commit()
            return OperationResult.ok(
                f"Complaint resolved. Rs. {charge:,} will be added to next month's bill."
            )
        except Exception as exc:
            logger.exception("Error resolving complaint with charge", extra={"complaint_id": str(complaint_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to resolve complaint: {exc}")

    @staticmethod
    async def add_charge_to_complaint(
        db: AsyncSession,
        complaint_id: UUID,
        amount: Decimal,
    ) -> OperationResult:
        """Set or change the charge on a complaint that has not been billed."""
        try:
            complaint = await ComplaintService.get_complaint_by_id(db, complaint_id)
            if not complaint:
                return OperationResult.fail("Complaint not found", ErrorCode.NOT_FOUND)
            if complaint.added_to_bill:
                return OperationResult.fail(
                    "Charge already added to bill for this complaint", ErrorCode.CONFLICT
                )
            charge = to_money(amount)
            if charge <= 0:
                return OperationResult.fail("Charge amount must be positive", ErrorCode.VALIDATION)
            complaint.charge_amount = charge
            await db.commit()
            return OperationResult.ok(f"Charge of Rs. {charge} added to complaint")
        except Exception as exc:
            logger.exception("Error adding charge to complaint", extra={"complaint_id": str(complaint_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to add charge to complaint: {exc}")

    @staticmethod
    async def remove_charge_from_complaint(db: AsyncSession, complaint_id: UUID) -> OperationResult:
        """Drop a charge that has not reached a bill yet."""
        try:
            complaint = await ComplaintService.get_complaint_by_id(db, complaint_id)
            if not complaint:
                return OperationResult.fail("Complaint not found", ErrorCode.NOT_FOUND)
            if complaint.added_to_bill:
                return OperationResult.fail(
                    "Charge is already on a bill and cannot be removed", ErrorCode.CONFLICT
                )
            complaint.charge_amount = None
            complaint.bill_id = None
            await db.commit()
            return OperationResult.ok("Charge removed from complaint")
        except Exception as exc:
            logger.exception("Error removing charge from complaint", extra={"complaint_id": str(complaint_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to remove charge from complaint: {exc}")
