from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core import security
from app.models.user import User
from app.services.user_service import UserService
from app.schemas.auth import LoginRequest, RefreshRequest, Token
from app.schemas.responses import SuccessResponse

router = APIRouter()


def _issue_tokens(user: User) -> Token:
    claims = {"sub": str(user.id), "role": user.role.value}
    return Token(
        access_token=security.create_access_token(data=claims),
        refresh_token=security.create_refresh_token(data=claims),
        token_type="bearer",
        role=user.role.value,
        user_id=str(user.id),
        house_no=user.house_no,
    )


@router.post("/login", response_model=SuccessResponse[Token])
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Unified login for admins, residents and security guards.
    The returned role decides which screens the client opens.
    """
    user = await UserService.authenticate_user(db, email=login_data.email, password=login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    return SuccessResponse(data=_issue_tokens(user), message="Login successful")


@router.post("/refresh", response_model=SuccessResponse[Token])
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """Trade a refresh token for a fresh token pair."""
    payload = security.decode_token(body.refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = await UserService.get_user_by_id(db, user_id)
    if not user or not user.is_active or user.is_deleted:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    return SuccessResponse(data=_issue_tokens(user), message="Token refreshed")
