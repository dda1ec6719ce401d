"""User Management Endpoints"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.cache import DataCache
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.responses import SuccessResponse
from app.schemas.user import PasswordChange, UserCreate, UserResponse
from app.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[UserResponse]])
async def list_users(
    role: Optional[UserRole] = None,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
    cache: DataCache = Depends(deps.get_cache),
) -> Any:
    """List users, optionally by role. Admin only."""
    users = await UserService.list_users(db, role=role, cache=cache)
    return SuccessResponse(data=users)


@router.post("", response_model=SuccessResponse[UserResponse])
async def create_user(
    user_in: UserCreate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Create a resident, security guard or admin account. Admin only."""
    try:
        user = await UserService.create_user(db, user_in, created_by=current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return SuccessResponse(data=UserResponse.model_validate(user), message="User created successfully")


@router.get("/me", response_model=SuccessResponse[UserResponse])
async def read_current_user(current_user: User = Depends(deps.get_current_user)) -> Any:
    return SuccessResponse(data=UserResponse.model_validate(current_user))


@router.post("/me/password", response_model=SuccessResponse)
async def change_password(
    body: PasswordChange,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    user = await UserService.change_password(db, current_user.id, body.current_password, body.new_password)
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
    return SuccessResponse(message="Password updated successfully")


@router.delete("/{user_id}", response_model=SuccessResponse)
async def deactivate_user(
    user_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Deactivate (soft delete) a user. Admin only."""
    if user_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate yourself")
    if not await UserService.deactivate_user(db, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return SuccessResponse(message="User deactivated")
