"""Billing rules: bill totals, carried-forward dues and late fees.

Plain functions over plain values so the bill run and the single-bill path
share one definition of each rule.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Mapping, NamedTuple, Sequence, Union

from app.models.enums import OUTSTANDING_BILL_STATUSES
from app.schemas.billing import BillComplaintCharge

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

Money = Union[Decimal, int, float, str, None]


def to_money(value: Money) -> Decimal:
    """
    Quantize to cents. Floats go through str() to avoid binary noise.

    Raises:
        ValueError: for anything that is not a finite number
    """
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
        if amount.is_finite():
            return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Not a valid amount: {value!r}")
    raise ValueError(f"Amount must be a finite number, got {value}")


def _line_amount(line: Union[Mapping[str, Any], BillComplaintCharge]) -> Decimal:
    if isinstance(line, BillComplaintCharge):
        return to_money(line.amount)
    return to_money(line.get("amount"))


def calculate_bill_total(
    base_charges: Money,
    complaint_charges: Sequence[Union[Mapping[str, Any], BillComplaintCharge]],
    previous_dues: Money,
) -> Decimal:
    """base + sum(complaint charges) + previous dues."""
    complaint_total = sum((_line_amount(c) for c in complaint_charges), ZERO)
    return to_money(to_money(base_charges) + complaint_total + to_money(previous_dues))


class CarryForward(NamedTuple):
    """Debt carried into a new bill from earlier unpaid bills."""
    dues: Decimal
    late_fee: Decimal
    bill_count: int

    @property
    def total(self) -> Decimal:
        """What lands in the breakdown's previous_dues"""
        return self.dues + self.late_fee


def calculate_carry_forward(prior_bills: Iterable[Any], late_fee_rate: Money) -> CarryForward:
    """
    Sum unpaid or pending prior bills and a late fee on each.

    Bills in any other status are ignored, so callers may pass every earlier
    bill of the resident.
    """
    rate = Decimal(str(late_fee_rate))
    dues = ZERO
    late_fee = ZERO
    count = 0
    for bill in prior_bills:
        if bill.status not in OUTSTANDING_BILL_STATUSES:
            continue
        amount = to_money(bill.amount)
        dues += amount
        late_fee += to_money(amount * rate)
        count += 1
    return CarryForward(dues=dues, late_fee=late_fee, bill_count=count)


def complaint_charge_line(complaint: Any, amount: Money = None) -> dict:
    """
    Breakdown line item for a charged complaint, in its stored (JSON) form.

    ``amount`` overrides the complaint's own charge_amount, for charges that
    are being set in the same call.
    """
    number = complaint.complaint_number or f"C-{str(complaint.id)[-6:]}"
    charge = BillComplaintCharge(
        complaint_id=complaint.id,
        complaint_number=number,
        description=complaint.title or "Complaint charge",
        amount=to_money(amount if amount is not None else complaint.charge_amount),
    )
    return charge.model_dump(mode="json")
