"""User Service - Business Logic Layer"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.cache import DataCache
from app.core.security import get_password_hash, verify_password
from app.models.user import User
from app.models.enums import UserRole
from app.schemas.user import UserCreate, UserResponse

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user-related operations"""

    @staticmethod
    async def create_user(
        db: AsyncSession,
        user_in: UserCreate,
        created_by: Optional[UUID] = None,
        auto_commit: bool = True,
    ) -> User:
        """
        Create an account. Residents need a house number.

        Raises:
            ValueError: if the email is taken or a resident has no house number
        """
        if await UserService.get_user_by_email(db, user_in.email):
            raise ValueError(f"A user with email {user_in.email} already exists")
        if user_in.role == UserRole.RESIDENT and not (user_in.house_no or "").strip():
            raise ValueError("House number is required for residents")

        db_user = User(
            email=user_in.email,
            hashed_password=get_password_hash(user_in.password),
            name=user_in.name.strip(),
            house_no=(user_in.house_no or "").strip() or None,
            cnic=user_in.cnic,
            role=user_in.role,
            is_active=True,
            created_by=created_by,
        )
        db.add(db_user)
        if auto_commit:
            await db.commit()
            await db.refresh(db_user)
        else:
            await db.flush()
        logger.info("User created", extra={"user_id": str(db_user.id), "role": user_in.role.value})
        return db_user

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        """
        Get user by ID.

        Args:
            db: Database session
            user_id: User ID

        Returns:
            User or None if not found
        """
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_residents(db: AsyncSession) -> List[User]:
        """The billing population: active, non-deleted residents."""
        result = await db.execute(
            select(User)
            .where(
                User.role == UserRole.RESIDENT,
                User.is_active == True,
                User.deleted_at.is_(None),
            )
            .order_by(User.house_no, User.name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_resident_by_house(db: AsyncSession, house_no: str) -> Optional[User]:
        """Active resident living at ``house_no``; matching ignores case and padding."""
        normalized = (house_no or "").strip().upper()
        if not normalized:
            return None
        result = await db.execute(
            select(User)
            .where(
                func.upper(User.house_no) == normalized,
                User.role == UserRole.RESIDENT,
                User.is_active == True,
                User.deleted_at.is_(None),
            )
            .order_by(User.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_users(
        db: AsyncSession,
        role: Optional[UserRole] = None,
        cache: Optional[DataCache] = None,
    ) -> List[UserResponse]:
        """Non-deleted users, optionally filtered by role. Cached per role."""
        cache_key = f"users:list:{role.value if role else 'all'}"
        if cache is not None:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        query = select(User).where(User.deleted_at.is_(None))
        if role is not None:
            query = query.where(User.role == role)
        result = await db.execute(query.order_by(User.created_at.desc()))
        users = [UserResponse.model_validate(u) for u in result.scalars().all()]

        if cache is not None:
            cache.set(cache_key, users)
        return users

    @staticmethod
    async def count_residents(db: AsyncSession) -> int:
        return await db.scalar(
            select(func.count(User.id)).where(
                User.role == UserRole.RESIDENT,
                User.is_active == True,
                User.deleted_at.is_(None),
            )
        ) or 0

    @staticmethod
    async def deactivate_user(db: AsyncSession, user_id: UUID) -> bool:
        """
        Soft-delete a user. Their bills and complaints stay.

        Returns:
            True if deactivated, False if not found
        """
        db_user = await UserService.get_user_by_id(db, user_id)
        if not db_user or db_user.is_deleted:
            return False

        db_user.is_active = False
        db_user.soft_delete()
        await db.commit()
        return True

    @staticmethod
    async def authenticate_user(
        db: AsyncSession,
        email: str,
        password: str
    ) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User if authenticated, None otherwise
        """
        user = await UserService.get_user_by_email(db, email)

        if not user:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        if not user.is_active or user.is_deleted:
            return None

        return user

    @staticmethod
    async def change_password(
        db: AsyncSession,
        user_id: UUID,
        current_password: str,
        new_password: str
    ) -> Optional[User]:
        """
        Change user password.

        Returns:
            Updated user or None if authentication failed
        """
        user = await UserService.get_user_by_id(db, user_id)

        if not user:
            return None

        if not verify_password(current_password, user.hashed_password):
            return None

        user.hashed_password = get_password_hash(new_password)
        await db.commit()
        await db.refresh(user)

        return user
