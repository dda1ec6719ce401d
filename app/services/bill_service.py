"""Bill Service - bill lookups and the Draft/Unpaid/Pending/Paid lifecycle"""

from typing import Optional, List, Dict, Any
from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.cache import DataCache
from app.models.billing import Bill
from app.models.enums import BillStatus, OUTSTANDING_BILL_STATUSES
from app.schemas.billing import BillComplaintCharge, BillResponse
from app.schemas.responses import OperationResult, ErrorCode
from app.utils.time import get_utc_now

logger = logging.getLogger(__name__)


class BillService:
    """Service layer for bill reads and status transitions"""

    # Queries

    @staticmethod
    async def get_bill_by_id(db: AsyncSession, bill_id: UUID) -> Optional[Bill]:
        result = await db.execute(
            select(Bill).where(Bill.id == bill_id, Bill.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_bill_for_month(db: AsyncSession, resident_id: UUID, month: str) -> Optional[Bill]:
        """The resident's live bill for ``month`` (YYYY-MM), if any."""
        result = await db.execute(
            select(Bill)
            .where(
                Bill.resident_id == resident_id,
                Bill.month == month,
                Bill.deleted_at.is_(None),
            )
            .limit(1)
        )
        return result.scalars().first()

    @staticmethod
    async def get_outstanding_bills(db: AsyncSession, resident_id: UUID, before_month: str) -> List[Bill]:
        """Unpaid or pending bills for months strictly before ``before_month``."""
        result = await db.execute(
            select(Bill)
            .where(
                Bill.resident_id == resident_id,
                Bill.month < before_month,
                Bill.status.in_(OUTSTANDING_BILL_STATUSES),
                Bill.deleted_at.is_(None),
            )
            .order_by(Bill.month)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_resident_bills(
        db: AsyncSession,
        resident_id: UUID,
        include_archived: bool = False,
        cache: Optional[DataCache] = None,
    ) -> List[BillResponse]:
        """Bills a resident can see (everything but drafts), newest month first."""
        cache_key = f"bills:resident:{resident_id}:{include_archived}"
        if cache is not None:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        query = select(Bill).where(
            Bill.resident_id == resident_id,
            Bill.status != BillStatus.DRAFT,
            Bill.deleted_at.is_(None),
        )
        if not include_archived:
            query = query.where(Bill.is_archived == False)
        result = await db.execute(query.order_by(Bill.month.desc()))
        bills = [BillResponse.from_model(b) for b in result.scalars().all()]

        if cache is not None:
            cache.set(cache_key, bills)
        return bills

    @staticmethod
    async def list_resident_bill_history(db: AsyncSession, resident_id: UUID) -> List[BillResponse]:
        result = await db.execute(
            select(Bill)
            .where(
                Bill.resident_id == resident_id,
                Bill.status == BillStatus.PAID,
                Bill.deleted_at.is_(None),
            )
            .order_by(Bill.month.desc())
        )
        return [BillResponse.from_model(b) for b in result.scalars().all()]

    @staticmethod
    async def list_all_bills(
        db: AsyncSession,
        include_drafts: bool = True,
        month: Optional[str] = None,
        cache: Optional[DataCache] = None,
    ) -> List[BillResponse]:
        """Admin view of every bill, newest month first."""
        cache_key = f"bills:admin:all:{include_drafts}:{month or '*'}"
        if cache is not None:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        query = select(Bill).where(Bill.deleted_at.is_(None))
        if not include_drafts:
            query = query.where(Bill.status != BillStatus.DRAFT)
        if month:
            query = query.where(Bill.month == month)
        result = await db.execute(query.order_by(Bill.month.desc(), Bill.house_no))
        bills = [BillResponse.from_model(b) for b in result.scalars().all()]

        if cache is not None:
            cache.set(cache_key, bills)
        return bills

    @staticmethod
    async def list_pending_bills(db: AsyncSession) -> List[BillResponse]:
        """Bills with a payment proof awaiting verification."""
        result = await db.execute(
            select(Bill)
            .where(Bill.status == BillStatus.PENDING, Bill.deleted_at.is_(None))
            .order_by(Bill.month.desc())
        )
        return [BillResponse.from_model(b) for b in result.scalars().all()]

    @staticmethod
    async def get_stats(db: AsyncSession) -> Dict[str, Any]:
        """Bill counts per status and the total still owed."""
        rows = await db.execute(
            select(Bill.status, func.count(Bill.id))
            .where(Bill.deleted_at.is_(None))
            .group_by(Bill.status)
        )
        counts = {status.value: 0 for status in BillStatus}
        for status, count in rows.all():
            counts[BillStatus(status).value] = count
        outstanding = await db.scalar(
            select(func.coalesce(func.sum(Bill.amount), 0)).where(
                Bill.status.in_(OUTSTANDING_BILL_STATUSES),
                Bill.deleted_at.is_(None),
            )
        )
        return {"bills_by_status": counts, "outstanding_amount": outstanding or 0}

    # Lifecycle

    @staticmethod
    async def _transition(
        db: AsyncSession,
        bill_id: UUID,
        allowed_from: tuple,
        action: str,
    ) -> tuple:
        """Load a bill and check it may take ``action``. Returns (bill, failure)."""
        bill = await BillService.get_bill_by_id(db, bill_id)
        if not bill:
            return None, OperationResult.fail("Bill not found", ErrorCode.NOT_FOUND)
        if bill.status not in allowed_from:
            return None, OperationResult.fail(
                f"Cannot {action} a bill with status {bill.status.value}", ErrorCode.CONFLICT
            )
        return bill, None

    @staticmethod
    async def send_bill(db: AsyncSession, bill_id: UUID, actor_id: UUID) -> OperationResult:
        """Draft -> Unpaid; the resident can now see the bill."""
        try:
            bill, failure = await BillService._transition(db, bill_id, (BillStatus.DRAFT,), "send")
            if failure:
                return failure
            bill.status = BillStatus.UNPAID
            bill.sent_by = actor_id
            bill.sent_at = get_utc_now()
            await db.commit()
            return OperationResult.ok("Bill sent to resident successfully", {"bill_id": str(bill.id)})
        except Exception as exc:
            logger.exception("Error sending bill", extra={"bill_id": str(bill_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to send bill to resident: {exc}")

    @staticmethod
    async def publish_all_drafts(db: AsyncSession, actor_id: UUID) -> OperationResult:
        """Send every draft bill in one commit."""
        try:
            result = await db.execute(
                select(Bill).where(Bill.status == BillStatus.DRAFT, Bill.deleted_at.is_(None))
            )
            drafts = list(result.scalars().all())
            if not drafts:
                return OperationResult.ok("No draft bills to publish", {"bills_published": 0})

            now = get_utc_now()
            for bill in drafts:
                bill.status = BillStatus.UNPAID
                bill.sent_by = actor_id
                bill.sent_at = now
            await db.commit()

            count = len(drafts)
            logger.info("Published draft bills", extra={"count": count})
            return OperationResult.ok(
                f"{count} bill{'s' if count != 1 else ''} sent to residents successfully",
                {"bills_published": count},
            )
        except Exception as exc:
            logger.exception("Error publishing draft bills")
            await db.rollback()
            return OperationResult.fail(f"Failed to publish bills: {exc}")

    @staticmethod
    async def add_complaint_charge(
        db: AsyncSession,
        bill_id: UUID,
        charge: BillComplaintCharge,
        auto_commit: bool = True,
    ) -> OperationResult:
        """
        Append a complaint charge to a draft bill.

        Sent bills are never modified; their charges wait for the next run.
        """
        bill, failure = await BillService._transition(db, bill_id, (BillStatus.DRAFT,), "add a charge to")
        if failure:
            return failure
        if any(str(line.get("complaint_id")) == str(charge.complaint_id) for line in bill.complaint_charges or []):
            return OperationResult.fail(
                f"Complaint {charge.complaint_number} is already on this bill", ErrorCode.DUPLICATE
            )
        bill.add_complaint_charge(charge.model_dump(mode="json"))
        if auto_commit:
            await db.commit()
        return OperationResult.ok(
            f"Complaint charge of Rs. {charge.amount} added to bill",
            {"bill_id": str(bill.id), "amount": str(bill.amount)},
        )

    @staticmethod
    async def upload_payment_proof(
        db: AsyncSession,
        bill_id: UUID,
        resident_id: UUID,
        proof_url: str,
    ) -> OperationResult:
        """Unpaid -> Pending once the resident attaches a proof."""
        try:
            bill, failure = await BillService._transition(
                db, bill_id, (BillStatus.UNPAID,), "upload proof for"
            )
            if failure:
                return failure
            if bill.resident_id != resident_id:
                return OperationResult.fail("Bill not found", ErrorCode.NOT_FOUND)
            bill.proof_url = proof_url
            bill.proof_uploaded_at = get_utc_now()
            bill.status = BillStatus.PENDING
            await db.commit()
            return OperationResult.ok("Payment proof uploaded successfully")
        except Exception as exc:
            logger.exception("Error uploading payment proof", extra={"bill_id": str(bill_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to upload payment proof: {exc}")

    @staticmethod
    async def verify_payment(db: AsyncSession, bill_id: UUID, actor_id: UUID) -> OperationResult:
        """Pending -> Paid."""
        try:
            bill, failure = await BillService._transition(db, bill_id, (BillStatus.PENDING,), "verify")
            if failure:
                return failure
            bill.status = BillStatus.PAID
            bill.verified_by = actor_id
            bill.verified_at = get_utc_now()
            await db.commit()
            return OperationResult.ok("Payment verified successfully")
        except Exception as exc:
            logger.exception("Error verifying payment", extra={"bill_id": str(bill_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to verify payment: {exc}")

    @staticmethod
    async def reject_payment_proof(db: AsyncSession, bill_id: UUID) -> OperationResult:
        """Pending -> Unpaid; the proof is discarded."""
        try:
            bill, failure = await BillService._transition(db, bill_id, (BillStatus.PENDING,), "reject")
            if failure:
                return failure
            bill.proof_url = None
            bill.proof_uploaded_at = None
            bill.status = BillStatus.UNPAID
            await db.commit()
            return OperationResult.ok("Payment proof rejected")
        except Exception as exc:
            logger.exception("Error rejecting payment proof", extra={"bill_id": str(bill_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to reject payment proof: {exc}")

    @staticmethod
    async def archive_paid_bills(db: AsyncSession) -> OperationResult:
        """Archive every paid bill that is not archived yet."""
        try:
            result = await db.execute(
                select(Bill).where(
                    Bill.status == BillStatus.PAID,
                    Bill.is_archived == False,
                    Bill.deleted_at.is_(None),
                )
            )
            bills = list(result.scalars().all())
            for bill in bills:
                bill.is_archived = True
            await db.commit()
            return OperationResult.ok(f"{len(bills)} paid bills archived", {"bills_archived": len(bills)})
        except Exception as exc:
            logger.exception("Error archiving paid bills")
            await db.rollback()
            return OperationResult.fail(f"Failed to archive paid bills: {exc}")
