"""Integration tests: Billing endpoints."""

import random
import pytest
from decimal import Decimal
from httpx import AsyncClient

pytestmark = pytest.mark.requires_db


@pytest.fixture
def month() -> str:
    """A far-future month so runs from other tests never collide."""
    return f"{random.randint(2100, 9000)}-{random.randint(1, 11):02d}"


def _next_month(month: str) -> str:
    year, mon = (int(p) for p in month.split("-"))
    return f"{year}-{mon + 1:02d}"


async def _my_bill(client: AsyncClient, api_base: str, headers: dict, month: str):
    resp = await client.get(f"{api_base}/bills/me", headers=headers)
    assert resp.status_code == 200, resp.text
    return next((b for b in resp.json()["data"] if b["month"] == month), None)


@pytest.mark.asyncio
async def test_generate_monthly_bills_and_pay(
    async_client: AsyncClient, api_base: str, admin_headers: dict, resident: dict, month: str
):
    resp = await async_client.post(
        f"{api_base}/bills/generate",
        headers=admin_headers,
        json={"month": month, "base_charges": "1000"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["bills_created"] >= 1

    bill = await _my_bill(async_client, api_base, resident["headers"], month)
    assert bill is not None
    assert bill["status"] == "Unpaid"
    assert Decimal(bill["amount"]) == Decimal("1000.00")
    assert bill["house_no"] == resident["house_no"]
    assert bill["due_date"].endswith("-25")

    # Second run for the same month is a no-op
    resp = await async_client.post(
        f"{api_base}/bills/generate",
        headers=admin_headers,
        json={"month": month, "base_charges": "1000"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["bills_created"] == 0
    assert resp.json()["data"]["bills_skipped"] >= 1

    resp = await async_client.post(
        f"{api_base}/bills/{bill['id']}/proof",
        headers=resident["headers"],
        json={"proof_url": "https://files.example.com/proof.jpg"},
    )
    assert resp.status_code == 200, resp.text

    resp = await async_client.get(f"{api_base}/bills/pending", headers=admin_headers)
    assert any(b["id"] == bill["id"] for b in resp.json()["data"])

    resp = await async_client.post(f"{api_base}/bills/{bill['id']}/verify", headers=admin_headers)
    assert resp.status_code == 200, resp.text

    resp = await async_client.get(f"{api_base}/bills/me/history", headers=resident["headers"])
    assert any(b["id"] == bill["id"] and b["status"] == "Paid" for b in resp.json()["data"])


@pytest.mark.asyncio
async def test_unpaid_bill_carries_into_next_month(
    async_client: AsyncClient, api_base: str, admin_headers: dict, resident: dict, month: str
):
    for m in (month, _next_month(month)):
        resp = await async_client.post(
            f"{api_base}/bills/generate",
            headers=admin_headers,
            json={"month": m, "base_charges": "1000"},
        )
        assert resp.status_code == 200, resp.text

    bill = await _my_bill(async_client, api_base, resident["headers"], _next_month(month))
    assert Decimal(bill["breakdown"]["previous_dues"]) == Decimal("1100.00")
    assert Decimal(bill["amount"]) == Decimal("2100.00")


@pytest.mark.asyncio
async def test_single_bill_is_hidden_until_sent(
    async_client: AsyncClient, api_base: str, admin_headers: dict, resident: dict, month: str
):
    resp = await async_client.post(
        f"{api_base}/bills/single",
        headers=admin_headers,
        json={"resident_id": resident["id"], "month": month, "base_charges": "800"},
    )
    assert resp.status_code == 200, resp.text
    bill_id = resp.json()["data"]["bill_id"]

    assert await _my_bill(async_client, api_base, resident["headers"], month) is None
    resp = await async_client.get(f"{api_base}/bills/{bill_id}", headers=resident["headers"])
    assert resp.status_code == 404

    resp = await async_client.post(
        f"{api_base}/bills/single",
        headers=admin_headers,
        json={"resident_id": resident["id"], "month": month, "base_charges": "800"},
    )
    assert resp.status_code == 409

    resp = await async_client.post(f"{api_base}/bills/{bill_id}/send", headers=admin_headers)
    assert resp.status_code == 200, resp.text

    bill = await _my_bill(async_client, api_base, resident["headers"], month)
    assert bill["status"] == "Unpaid"
    assert Decimal(bill["amount"]) == Decimal("800.00")


@pytest.mark.asyncio
async def test_invalid_month_rejected(
    async_client: AsyncClient, api_base: str, admin_headers: dict
):
    resp = await async_client.post(
        f"{api_base}/bills/generate",
        headers=admin_headers,
        json={"month": "2024-13", "base_charges": "1000"},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_resident_cannot_generate_bills(
    async_client: AsyncClient, api_base: str, resident: dict, month: str
):
    resp = await async_client.post(
        f"{api_base}/bills/generate",
        headers=resident["headers"],
        json={"month": month, "base_charges": "1000"},
    )
    assert resp.status_code == 403
