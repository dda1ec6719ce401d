"""Unit tests for role dependencies and mapping service results onto HTTP responses."""

import pytest
from uuid import uuid4
from fastapi import HTTPException

from app.api.deps import require_admin_or_security, require_security, to_response
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.responses import ErrorCode, OperationResult


def test_success_is_wrapped():
    response = to_response(OperationResult.ok("3 bills generated", {"bills_created": 3}))
    assert response.success
    assert response.data == {"bills_created": 3}
    assert response.message == "3 bills generated"


@pytest.mark.parametrize(
    "code,status_code",
    [
        (ErrorCode.NOT_FOUND, 404),
        (ErrorCode.DUPLICATE, 409),
        (ErrorCode.CONFLICT, 409),
        (ErrorCode.VALIDATION, 422),
        (ErrorCode.FORBIDDEN, 403),
        (ErrorCode.FAILED, 500),
    ],
)
def test_failures_raise_matching_status(code, status_code):
    with pytest.raises(HTTPException) as exc_info:
        to_response(OperationResult.fail("nope", code))
    assert exc_info.value.status_code == status_code
    assert exc_info.value.detail == "nope"


def _user(role):
    return User(id=uuid4(), email="u@society.test", hashed_password="x", name="U", role=role, is_active=True)


@pytest.mark.asyncio
async def test_gate_logging_is_for_security_guards_only():
    guard = _user(UserRole.SECURITY)
    assert await require_security(guard) is guard
    for role in (UserRole.ADMIN, UserRole.RESIDENT):
        with pytest.raises(HTTPException) as exc_info:
            await require_security(_user(role))
        assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_gate_views_allow_admins_and_guards():
    for role in (UserRole.ADMIN, UserRole.SECURITY):
        user = _user(role)
        assert await require_admin_or_security(user) is user
    with pytest.raises(HTTPException) as exc_info:
        await require_admin_or_security(_user(UserRole.RESIDENT))
    assert exc_info.value.status_code == 403
