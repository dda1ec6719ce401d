"""Monthly Billing Service - bill runs with complaint charge reconciliation"""

import uuid
from decimal import Decimal
from typing import Tuple, Union
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.config import settings
from app.models.billing import Bill
from app.models.enums import BillStatus
from app.schemas.responses import OperationResult, ErrorCode
from app.services.bill_service import BillService
from app.services.complaint_service import ComplaintService
from app.services.user_service import UserService
from app.utils.billing import calculate_carry_forward, complaint_charge_line, to_money
from app.utils.time import BillingMonth, get_utc_now

logger = logging.getLogger(__name__)


def _parse_run_inputs(month: Union[str, BillingMonth], base_charges: Decimal) -> Tuple[BillingMonth, Decimal]:
    """Validated month and base charges; raises ValueError on bad input."""
    billing_month = BillingMonth.parse(month)
    base = to_money(base_charges)
    if base < 0:
        raise ValueError("Base charges cannot be negative")
    return billing_month, base


class MonthlyBillingService:
    """
    Creates monthly bills.

    The bulk run sends bills straight to residents (status Unpaid). A single
    bill is created as a Draft that an admin sends later.
    """

    @staticmethod
    async def generate_monthly_bills(
        db: AsyncSession,
        month: Union[str, BillingMonth],
        base_charges: Decimal,
        actor_id: UUID,
    ) -> OperationResult:
        """
        Bill every resident for ``month`` in a single transaction.

        Per resident: skip when a bill already exists for the month; carry
        forward unpaid and pending prior bills plus the late fee on each; fold
        in every unbilled complaint charge and mark those complaints billed.
        All bills and complaint updates are committed together or not at all.
        """
        try:
            billing_month, base = _parse_run_inputs(month, base_charges)
        except ValueError as exc:
            return OperationResult.fail(str(exc), ErrorCode.VALIDATION)

        month_str = str(billing_month)
        due_date = billing_month.due_date(settings.BILL_DUE_DAY)
        bills_created = 0
        bills_skipped = 0
        complaints_processed = 0

        try:
            residents = await UserService.get_residents(db)
            logger.info(
                "Generating monthly bills",
                extra={"month": month_str, "residents": len(residents)},
            )
            now = get_utc_now()

            for resident in residents:
                existing = await BillService.get_bill_for_month(db, resident.id, month_str)
                if existing is not None:
                    logger.info(
                        "Skipping resident, bill already exists",
                        extra={"resident_id": str(resident.id), "month": month_str},
                    )
                    bills_skipped += 1
                    continue

                prior_bills = await BillService.get_outstanding_bills(db, resident.id, month_str)
                carry = calculate_carry_forward(prior_bills, settings.LATE_FEE_RATE)

                # Assign the id up front so complaints can point at the bill
                bill = Bill(
                    id=uuid.uuid4(),
                    resident_id=resident.id,
                    resident_name=resident.name,
                    house_no=resident.house_no or "",
                    month=month_str,
                    base_charges=base,
                    complaint_charges=[],
                    previous_dues=carry.total,
                    due_date=due_date,
                    status=BillStatus.UNPAID,
                    is_archived=False,
                    sent_by=actor_id,
                    sent_at=now,
                    created_at=now,
                )

                unbilled = await ComplaintService.get_unbilled_complaints(db, resident.id)
                lines = []
                for complaint in unbilled:
                    lines.append(complaint_charge_line(complaint))
                    complaint.added_to_bill = True
                    complaint.bill_id = bill.id
                    complaints_processed += 1
                bill.complaint_charges = lines
                bill.recalculate_total()

                db.add(bill)
                bills_created += 1

            await db.commit()
        except Exception as exc:
            logger.exception("Error generating monthly bills", extra={"month": month_str})
            await db.rollback()
            return OperationResult.fail(f"Failed to generate monthly bills: {exc}")

        logger.info(
            "Monthly bills committed",
            extra={
                "month": month_str,
                "bills_created": bills_created,
                "bills_skipped": bills_skipped,
                "complaints_processed": complaints_processed,
            },
        )
        if bills_skipped:
            message = (
                f"{bills_created} bills created ({complaints_processed} complaint charges), "
                f"{bills_skipped} skipped for {month_str}"
            )
        else:
            message = (
                f"{bills_created} bills generated with {complaints_processed} "
                f"complaint charges for {month_str}"
            )
        return OperationResult.ok(
            message,
            {
                "bills_created": bills_created,
                "bills_skipped": bills_skipped,
                "complaints_processed": complaints_processed,
            },
        )

    @staticmethod
    async def generate_single_bill(
        db: AsyncSession,
        resident_id: UUID,
        resident_name: str,
        house_no: str,
        month: Union[str, BillingMonth],
        base_charges: Decimal,
        actor_id: UUID,
    ) -> OperationResult:
        """
        Draft bill for one resident.

        Same duplicate check and carry-forward rule as the monthly run, but no
        complaint charges are consumed and the bill waits to be sent.
        """
        try:
            billing_month, base = _parse_run_inputs(month, base_charges)
        except ValueError as exc:
            return OperationResult.fail(str(exc), ErrorCode.VALIDATION)
        month_str = str(billing_month)

        try:
            existing = await BillService.get_bill_for_month(db, resident_id, month_str)
            if existing is not None:
                return OperationResult.fail(
                    f"Bill already exists for {resident_name} for {month_str}", ErrorCode.DUPLICATE
                )

            prior_bills = await BillService.get_outstanding_bills(db, resident_id, month_str)
            carry = calculate_carry_forward(prior_bills, settings.LATE_FEE_RATE)

            bill = Bill(
                id=uuid.uuid4(),
                resident_id=resident_id,
                resident_name=resident_name,
                house_no=house_no or "",
                month=month_str,
                base_charges=base,
                complaint_charges=[],
                previous_dues=carry.total,
                due_date=billing_month.due_date(settings.BILL_DUE_DAY),
                status=BillStatus.DRAFT,
                is_archived=False,
                sent_by=None,
                sent_at=None,
            )
            bill.recalculate_total()
            db.add(bill)
            await db.commit()
        except Exception as exc:
            logger.exception("Error generating single bill", extra={"resident_id": str(resident_id)})
            await db.rollback()
            return OperationResult.fail(f"Failed to generate bill: {exc}")

        logger.info(
            "Draft bill created",
            extra={"bill_id": str(bill.id), "resident_id": str(resident_id), "month": month_str, "created_by": str(actor_id)},
        )
        return OperationResult.ok(
            f"Bill generated for {resident_name} ({house_no}) for {month_str}",
            {"bill_id": str(bill.id), "amount": str(bill.amount)},
        )
