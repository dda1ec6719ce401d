"""Unit tests for BillService lifecycle transitions."""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.billing import Bill
from app.models.enums import BillStatus
from app.schemas.billing import BillComplaintCharge
from app.schemas.responses import ErrorCode
from app.services.bill_service import BillService

GET_BILL = "app.services.bill_service.BillService.get_bill_by_id"


def make_db():
    db = AsyncMock(spec=AsyncSession)
    db.add = MagicMock()
    return db


def make_bill(status, resident_id=None):
    return Bill(
        id=uuid4(),
        resident_id=resident_id or uuid4(),
        resident_name="Ali Khan",
        house_no="A-12",
        month="2024-03",
        base_charges=Decimal("1000"),
        complaint_charges=[],
        previous_dues=Decimal("0"),
        amount=Decimal("1000"),
        due_date=date(2024, 3, 25),
        status=status,
        is_archived=False,
    )


@pytest.mark.asyncio
async def test_send_draft_bill():
    db = make_db()
    bill = make_bill(BillStatus.DRAFT)
    admin_id = uuid4()
    with patch(GET_BILL, new_callable=AsyncMock, return_value=bill):
        result = await BillService.send_bill(db, bill.id, admin_id)

    assert result.success
    assert bill.status == BillStatus.UNPAID
    assert bill.sent_by == admin_id
    assert bill.sent_at is not None
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_send_already_sent_bill_conflicts():
    db = make_db()
    bill = make_bill(BillStatus.UNPAID)
    with patch(GET_BILL, new_callable=AsyncMock, return_value=bill):
        result = await BillService.send_bill(db, bill.id, uuid4())

    assert not result.success
    assert result.code == ErrorCode.CONFLICT
    assert not db.commit.called


@pytest.mark.asyncio
async def test_missing_bill_is_not_found():
    db = make_db()
    with patch(GET_BILL, new_callable=AsyncMock, return_value=None):
        result = await BillService.verify_payment(db, uuid4(), uuid4())

    assert result.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_proof_upload_moves_to_pending():
    db = make_db()
    resident_id = uuid4()
    bill = make_bill(BillStatus.UNPAID, resident_id)
    with patch(GET_BILL, new_callable=AsyncMock, return_value=bill):
        result = await BillService.upload_payment_proof(db, bill.id, resident_id, "https://files/proof.jpg")

    assert result.success
    assert bill.status == BillStatus.PENDING
    assert bill.proof_url == "https://files/proof.jpg"
    assert bill.proof_uploaded_at is not None


@pytest.mark.asyncio
async def test_proof_upload_for_someone_elses_bill():
    db = make_db()
    bill = make_bill(BillStatus.UNPAID)
    with patch(GET_BILL, new_callable=AsyncMock, return_value=bill):
        result = await BillService.upload_payment_proof(db, bill.id, uuid4(), "https://files/proof.jpg")

    assert result.code == ErrorCode.NOT_FOUND
    assert bill.status == BillStatus.UNPAID


@pytest.mark.asyncio
async def test_verify_and_reject_only_from_pending():
    db = make_db()
    bill = make_bill(BillStatus.PENDING)
    bill.proof_url = "https://files/proof.jpg"
    admin_id = uuid4()
    with patch(GET_BILL, new_callable=AsyncMock, return_value=bill):
        rejected = await BillService.reject_payment_proof(db, bill.id)
        assert rejected.success
        assert bill.status == BillStatus.UNPAID
        assert bill.proof_url is None

        not_pending = await BillService.verify_payment(db, bill.id, admin_id)
        assert not_pending.code == ErrorCode.CONFLICT

        bill.status = BillStatus.PENDING
        verified = await BillService.verify_payment(db, bill.id, admin_id)

    assert verified.success
    assert bill.status == BillStatus.PAID
    assert bill.verified_by == admin_id


@pytest.mark.asyncio
async def test_complaint_charge_only_added_to_draft():
    db = make_db()
    bill = make_bill(BillStatus.UNPAID)
    charge = BillComplaintCharge(
        complaint_id=uuid4(), complaint_number="C002", description="Gate", amount=Decimal("100")
    )
    with patch(GET_BILL, new_callable=AsyncMock, return_value=bill):
        result = await BillService.add_complaint_charge(db, bill.id, charge)

    assert result.code == ErrorCode.CONFLICT
    assert bill.amount == Decimal("1000")


@pytest.mark.asyncio
async def test_complaint_charge_not_added_twice():
    db = make_db()
    bill = make_bill(BillStatus.DRAFT)
    charge = BillComplaintCharge(
        complaint_id=uuid4(), complaint_number="C002", description="Gate", amount=Decimal("100")
    )
    with patch(GET_BILL, new_callable=AsyncMock, return_value=bill):
        first = await BillService.add_complaint_charge(db, bill.id, charge)
        second = await BillService.add_complaint_charge(db, bill.id, charge)

    assert first.success
    assert second.code == ErrorCode.DUPLICATE
    assert bill.amount == Decimal("1100.00")
    assert len(bill.complaint_charges) == 1


@pytest.mark.asyncio
async def test_publish_all_drafts():
    db = make_db()
    drafts = [make_bill(BillStatus.DRAFT), make_bill(BillStatus.DRAFT)]
    mock_result = MagicMock()
    mock_result.scalars.return_value.all.return_value = drafts
    db.execute.return_value = mock_result

    result = await BillService.publish_all_drafts(db, uuid4())

    assert result.success
    assert result.data == {"bills_published": 2}
    assert result.message == "2 bills sent to residents successfully"
    assert all(b.status == BillStatus.UNPAID for b in drafts)
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_publish_with_no_drafts():
    db = make_db()
    mock_result = MagicMock()
    mock_result.scalars.return_value.all.return_value = []
    db.execute.return_value = mock_result

    result = await BillService.publish_all_drafts(db, uuid4())

    assert result.success
    assert result.data == {"bills_published": 0}
    assert not db.commit.called
