"""Unit tests for VehicleService: registration, ownership and plate uniqueness."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RegisteredVehicleType, UserRole
from app.models.user import User
from app.models.vehicle import RegisteredVehicle
from app.schemas.responses import ErrorCode
from app.schemas.vehicle import VehicleRegister, VehicleUpdate
from app.services.vehicle_service import VehicleService


def make_db():
    db = AsyncMock(spec=AsyncSession)
    db.add = MagicMock()
    return db


def make_resident():
    return User(
        id=uuid4(),
        email="owner@society.test",
        hashed_password="x",
        name="Bilal Raza",
        house_no="C-3",
        role=UserRole.RESIDENT,
        is_active=True,
    )


def make_vehicle(resident, vehicle_no="LEA 1234"):
    return RegisteredVehicle(
        id=uuid4(),
        vehicle_no=vehicle_no,
        type=RegisteredVehicleType.CAR,
        resident_id=resident.id,
        resident_name=resident.name,
        house_no=resident.house_no,
    )


def test_vehicle_number_is_normalized_on_input():
    assert VehicleRegister(vehicle_no="  lea 1234 ").vehicle_no == "LEA 1234"
    with pytest.raises(ValueError):
        VehicleRegister(vehicle_no="   ")


@pytest.mark.asyncio
async def test_register_stores_normalized_plate_with_owner():
    db = make_db()
    resident = make_resident()

    with patch("app.services.vehicle_service.VehicleService.get_vehicle_by_number", new_callable=AsyncMock, return_value=None):
        result = await VehicleService.register_vehicle(
            db, VehicleRegister(vehicle_no="lea 1234", type=RegisteredVehicleType.BIKE, color=" Red "), resident
        )

    assert result.success
    assert result.message == "Vehicle LEA 1234 registered successfully"
    vehicle = db.add.call_args[0][0]
    assert vehicle.vehicle_no == "LEA 1234"
    assert vehicle.type == RegisteredVehicleType.BIKE
    assert vehicle.color == "Red"
    assert vehicle.resident_id == resident.id
    assert vehicle.house_no == "C-3"
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_register_rejects_plate_in_any_case():
    db = make_db()
    resident = make_resident()
    taken = make_vehicle(make_resident())

    with patch("app.services.vehicle_service.VehicleService.get_vehicle_by_number", new_callable=AsyncMock, return_value=taken) as lookup:
        result = await VehicleService.register_vehicle(db, VehicleRegister(vehicle_no="Lea 1234"), resident)

    assert not result.success
    assert result.code == ErrorCode.DUPLICATE
    assert "LEA 1234 is already registered" in result.error
    lookup.assert_awaited_once_with(db, "LEA 1234")
    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_update_keeps_own_plate_and_rejects_someone_elses():
    db = make_db()
    resident = make_resident()
    vehicle = make_vehicle(resident)
    other = make_vehicle(make_resident(), vehicle_no="KHI 999")

    with patch("app.services.vehicle_service.VehicleService.get_vehicle_by_id", new_callable=AsyncMock, return_value=vehicle), \
            patch("app.services.vehicle_service.VehicleService.get_vehicle_by_number", new_callable=AsyncMock) as lookup:
        lookup.return_value = vehicle
        same = await VehicleService.update_vehicle(
            db, vehicle.id, resident.id, VehicleUpdate(vehicle_no="lea 1234", color="Blue")
        )
        assert same.success
        assert vehicle.color == "Blue"

        lookup.return_value = other
        clash = await VehicleService.update_vehicle(db, vehicle.id, resident.id, VehicleUpdate(vehicle_no="khi 999"))

    assert not clash.success
    assert clash.code == ErrorCode.DUPLICATE
    assert vehicle.vehicle_no == "LEA 1234"


@pytest.mark.asyncio
async def test_only_owner_can_update_or_delete():
    db = make_db()
    vehicle = make_vehicle(make_resident())
    stranger = uuid4()

    with patch("app.services.vehicle_service.VehicleService.get_vehicle_by_id", new_callable=AsyncMock, return_value=vehicle):
        updated = await VehicleService.update_vehicle(db, vehicle.id, stranger, VehicleUpdate(color="Green"))
        deleted = await VehicleService.delete_vehicle(db, vehicle.id, stranger)

    assert updated.code == ErrorCode.NOT_FOUND
    assert deleted.code == ErrorCode.NOT_FOUND
    db.delete.assert_not_called()
    db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_owner_deletes_vehicle():
    db = make_db()
    resident = make_resident()
    vehicle = make_vehicle(resident)

    with patch("app.services.vehicle_service.VehicleService.get_vehicle_by_id", new_callable=AsyncMock, return_value=vehicle):
        result = await VehicleService.delete_vehicle(db, vehicle.id, resident.id)

    assert result.success
    db.delete.assert_awaited_once_with(vehicle)
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_failed_commit_is_reported():
    db = make_db()
    db.commit.side_effect = RuntimeError("connection lost")

    with patch("app.services.vehicle_service.VehicleService.get_vehicle_by_number", new_callable=AsyncMock, return_value=None):
        result = await VehicleService.register_vehicle(db, VehicleRegister(vehicle_no="ABC 1"), make_resident())

    assert not result.success
    assert result.code == ErrorCode.FAILED
    assert "connection lost" in result.error
    db.rollback.assert_awaited_once()
