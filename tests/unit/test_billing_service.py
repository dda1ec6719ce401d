"""Unit tests for MonthlyBillingService."""

import pytest
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.billing import Bill
from app.models.complaint import Complaint
from app.models.enums import BillStatus, ComplaintCategory, ComplaintStatus, UserRole
from app.models.user import User
from app.schemas.responses import ErrorCode
from app.services.billing_service import MonthlyBillingService


def make_db():
    db = AsyncMock(spec=AsyncSession)
    db.add = MagicMock()
    return db


def make_resident(name="Ali Khan", house_no="A-12"):
    return User(
        id=uuid4(),
        email=f"{uuid4().hex[:8]}@society.test",
        hashed_password="x",
        name=name,
        house_no=house_no,
        role=UserRole.RESIDENT,
        is_active=True,
    )


def make_bill(resident, month, amount, status):
    return Bill(
        id=uuid4(),
        resident_id=resident.id,
        resident_name=resident.name,
        house_no=resident.house_no,
        month=month,
        base_charges=Decimal(amount),
        complaint_charges=[],
        previous_dues=Decimal("0"),
        amount=Decimal(amount),
        due_date=date(2024, 1, 25),
        status=status,
        is_archived=False,
    )


def make_complaint(resident, number, charge):
    return Complaint(
        id=uuid4(),
        complaint_number=number,
        title="Water leak",
        description="Leak in the main line",
        category=ComplaintCategory.WATER,
        status=ComplaintStatus.RESOLVED,
        resident_id=resident.id,
        resident_name=resident.name,
        house_no=resident.house_no,
        charge_amount=Decimal(charge),
        added_to_bill=False,
        bill_id=None,
    )


@pytest.fixture
def queries():
    """Patch the read helpers the bill run depends on."""
    with patch("app.services.billing_service.UserService.get_residents", new_callable=AsyncMock) as residents, \
            patch("app.services.billing_service.BillService.get_bill_for_month", new_callable=AsyncMock) as existing, \
            patch("app.services.billing_service.BillService.get_outstanding_bills", new_callable=AsyncMock) as outstanding, \
            patch("app.services.billing_service.ComplaintService.get_unbilled_complaints", new_callable=AsyncMock) as unbilled:
        residents.return_value = []
        existing.return_value = None
        outstanding.return_value = []
        unbilled.return_value = []
        yield SimpleNamespace(
            residents=residents, existing=existing, outstanding=outstanding, unbilled=unbilled
        )


def added_bills(db):
    return [call.args[0] for call in db.add.call_args_list if isinstance(call.args[0], Bill)]


@pytest.mark.asyncio
async def test_first_bill_for_resident(queries):
    db = make_db()
    resident = make_resident()
    queries.residents.return_value = [resident]

    result = await MonthlyBillingService.generate_monthly_bills(db, "2024-01", Decimal("1000"), uuid4())

    assert result.success
    assert result.data == {"bills_created": 1, "bills_skipped": 0, "complaints_processed": 0}
    (bill,) = added_bills(db)
    assert bill.amount == Decimal("1000.00")
    assert bill.previous_dues == Decimal("0.00")
    assert bill.status == BillStatus.UNPAID
    assert bill.due_date == date(2024, 1, 25)
    assert bill.month == "2024-01"
    assert bill.house_no == "A-12"
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_unpaid_prior_bill_carries_forward_with_late_fee(queries):
    db = make_db()
    resident = make_resident()
    queries.residents.return_value = [resident]
    queries.outstanding.return_value = [make_bill(resident, "2024-01", "1000", BillStatus.UNPAID)]

    result = await MonthlyBillingService.generate_monthly_bills(db, "2024-02", Decimal("1000"), uuid4())

    assert result.success
    (bill,) = added_bills(db)
    assert bill.previous_dues == Decimal("1100.00")
    assert bill.amount == Decimal("2100.00")
    queries.outstanding.assert_awaited_once_with(db, resident.id, "2024-02")


@pytest.mark.asyncio
async def test_unbilled_complaint_charge_is_folded_in(queries):
    db = make_db()
    resident = make_resident()
    complaint = make_complaint(resident, "C001", "200")
    queries.residents.return_value = [resident]
    queries.unbilled.return_value = [complaint]

    result = await MonthlyBillingService.generate_monthly_bills(db, "2024-01", Decimal("1000"), uuid4())

    assert result.success
    assert result.data["complaints_processed"] == 1
    (bill,) = added_bills(db)
    assert bill.amount == Decimal("1200.00")
    assert len(bill.complaint_charges) == 1
    assert bill.complaint_charges[0]["complaint_number"] == "C001"
    assert complaint.added_to_bill is True
    assert complaint.bill_id == bill.id


@pytest.mark.asyncio
async def test_existing_bill_is_skipped(queries):
    db = make_db()
    billed, fresh = make_resident("Billed", "A-1"), make_resident("Fresh", "A-2")
    queries.residents.return_value = [billed, fresh]
    queries.existing.side_effect = lambda _db, resident_id, month: (
        make_bill(billed, month, "1000", BillStatus.UNPAID) if resident_id == billed.id else None
    )

    result = await MonthlyBillingService.generate_monthly_bills(db, "2024-01", Decimal("1000"), uuid4())

    assert result.success
    assert result.data["bills_created"] == 1
    assert result.data["bills_skipped"] == 1
    assert "skipped" in result.message
    (bill,) = added_bills(db)
    assert bill.resident_id == fresh.id


@pytest.mark.asyncio
async def test_rerun_for_same_month_creates_nothing(queries):
    db = make_db()
    resident = make_resident()
    queries.residents.return_value = [resident]
    queries.existing.return_value = make_bill(resident, "2024-01", "1000", BillStatus.UNPAID)

    result = await MonthlyBillingService.generate_monthly_bills(db, "2024-01", Decimal("1000"), uuid4())

    assert result.success
    assert result.data["bills_created"] == 0
    assert not db.add.called
    queries.unbilled.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_commit_rolls_back_everything(queries):
    db = make_db()
    db.commit.side_effect = RuntimeError("connection lost")
    resident = make_resident()
    complaint = make_complaint(resident, "C001", "200")
    queries.residents.return_value = [resident]
    queries.unbilled.return_value = [complaint]

    result = await MonthlyBillingService.generate_monthly_bills(db, "2024-01", Decimal("1000"), uuid4())

    assert not result.success
    assert result.error.startswith("Failed to generate monthly bills")
    assert result.code == ErrorCode.FAILED
    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_invalid_month_is_rejected_before_any_query(queries):
    db = make_db()

    result = await MonthlyBillingService.generate_monthly_bills(db, "2024-13", Decimal("1000"), uuid4())

    assert not result.success
    assert result.code == ErrorCode.VALIDATION
    queries.residents.assert_not_awaited()
    assert not db.commit.called


@pytest.mark.asyncio
@pytest.mark.parametrize("base", [Decimal("NaN"), Decimal("Infinity"), Decimal("-5")])
async def test_unusable_base_charges_fail_without_raising(queries, base):
    db = make_db()

    result = await MonthlyBillingService.generate_monthly_bills(db, "2026-02", base, uuid4())

    assert not result.success
    assert result.code == ErrorCode.VALIDATION
    queries.residents.assert_not_awaited()
    assert not db.commit.called


@pytest.mark.asyncio
async def test_single_bill_rejects_non_finite_base_charges(queries):
    db = make_db()
    resident = make_resident()

    result = await MonthlyBillingService.generate_single_bill(
        db, resident.id, resident.name, resident.house_no, "2026-02", Decimal("Infinity"), uuid4()
    )

    assert not result.success
    assert result.code == ErrorCode.VALIDATION
    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_single_bill_is_a_draft_with_carry_forward(queries):
    db = make_db()
    resident = make_resident()
    queries.outstanding.return_value = [make_bill(resident, "2024-01", "1000", BillStatus.PENDING)]

    result = await MonthlyBillingService.generate_single_bill(
        db, resident.id, resident.name, resident.house_no, "2024-02", Decimal("1000"), uuid4()
    )

    assert result.success
    (bill,) = added_bills(db)
    assert bill.status == BillStatus.DRAFT
    assert bill.sent_at is None
    assert bill.complaint_charges == []
    assert bill.amount == Decimal("2100.00")
    assert result.data == {"bill_id": str(bill.id), "amount": "2100.00"}
    queries.unbilled.assert_not_awaited()


@pytest.mark.asyncio
async def test_single_bill_duplicate_month(queries):
    db = make_db()
    resident = make_resident()
    queries.existing.return_value = make_bill(resident, "2024-02", "1000", BillStatus.DRAFT)

    result = await MonthlyBillingService.generate_single_bill(
        db, resident.id, resident.name, resident.house_no, "2024-02", Decimal("1000"), uuid4()
    )

    assert not result.success
    assert result.code == ErrorCode.DUPLICATE
    assert result.error == f"Bill already exists for {resident.name} for 2024-02"
    assert not db.add.called
