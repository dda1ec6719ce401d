"""API Dependencies"""

from typing import AsyncGenerator, Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app import database
from app.core.cache import DataCache
from app.core.security import decode_token
from app.services.user_service import UserService
from app.models.user import User
from app.schemas.responses import ErrorCode, OperationResult, SuccessResponse

# Security scheme for bearer token
security = HTTPBearer()


def get_cache(request: Request) -> DataCache:
    """The process-wide read cache created at startup."""
    return request.app.state.cache


async def get_db(cache: DataCache = Depends(get_cache)) -> AsyncGenerator[AsyncSession, None]:
    """Database session whose commits invalidate cached reads."""
    async with database.session_scope() as session:
        cache.watch(session)
        yield session


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        HTTPException: If token is invalid or user not found
    """
    payload = decode_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id_str: Optional[str] = payload.get("sub")
    try:
        user_id = UUID(user_id_str or "")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await UserService.get_user_by_id(db, user_id)
    if not user or user.is_deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user"
        )

    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Only administrators pass."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return current_user


async def require_resident(current_user: User = Depends(get_current_user)) -> User:
    """Only residents pass."""
    if not current_user.is_resident:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only residents can perform this action"
        )
    return current_user


async def require_security(current_user: User = Depends(get_current_user)) -> User:
    """Only security guards pass; gate logging is their job."""
    if not current_user.is_security:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only security guards can perform this action"
        )
    return current_user


async def require_admin_or_security(current_user: User = Depends(get_current_user)) -> User:
    """Admins and security guards pass; used for gate log views."""
    if not (current_user.is_admin or current_user.is_security):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return current_user


_FAILURE_STATUS = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DUPLICATE: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
}


def to_response(result: OperationResult) -> SuccessResponse:
    """Wrap a successful operation, or raise the HTTP error matching its failure."""
    if not result.success:
        raise HTTPException(
            status_code=_FAILURE_STATUS.get(result.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=result.error,
        )
    return SuccessResponse(data=result.data, message=result.message or "Operation successful")
