from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
import logging

from app.core.config import settings
from app.core.database import utcnow
from app.core.exceptions import AuthError, NotFoundError, ValidationError
from app.core.security import get_password_hash, verify_password, create_access_token
from app.modules.users.models import User, UserRole
from app.modules.users import schemas

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for accounts, credentials and admin user management"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def _get_or_404(self, user_id: int) -> User:
        user = await self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(data={"sub": str(user.id), "role": user.role.value})

    async def register(self, data: schemas.RegisterRequest) -> User:
        """Register a new account"""
        if await self.get_user_by_email(data.email):
            raise ValidationError("User already exists")

        user = User(
            name=data.name,
            email=data.email,
            phone=data.phone,
            hashed_password=get_password_hash(data.password),
            role=data.role,
            is_active=True
        )

        try:
            self.db.add(user)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("User already exists")

        await self.db.refresh(user)
        logger.info(f"User {user.id} registered with role {user.role.value}")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials and return the user, raising AuthError otherwise"""
        user = await self.get_user_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            raise AuthError("Invalid email or password")

        if not user.is_active:
            raise AuthError("User account is disabled")

        user.last_login_at = utcnow()
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def update_profile(self, user: User, data: schemas.ProfileUpdate) -> User:
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(user, field, value)

        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def change_password(self, user: User, data: schemas.ChangePasswordRequest) -> None:
        if not verify_password(data.current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect")

        user.hashed_password = get_password_hash(data.new_password)
        await self.db.commit()
        logger.info(f"User {user.id} changed password")

    async def list_users(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def delete_user(self, user_id: int, acting_user: User) -> None:
        user = await self._get_or_404(user_id)
        if user.id == acting_user.id:
            raise ValidationError("You cannot delete your own account")

        await self.db.delete(user)
        await self.db.commit()
        logger.info(f"User {user_id} deleted by admin {acting_user.id}")

    async def set_user_status(self, user_id: int, is_active: Optional[bool], acting_user: User) -> User:
        """Set is_active explicitly, or toggle it when is_active is None"""
        user = await self._get_or_404(user_id)
        if user.id == acting_user.id:
            raise ValidationError("You cannot change the status of your own account")

        user.is_active = (not user.is_active) if is_active is None else is_active
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"User {user_id} {'activated' if user.is_active else 'deactivated'} by admin {acting_user.id}")
        return user

    async def ensure_admin(self) -> Optional[User]:
        """Create the configured bootstrap admin if it does not exist yet"""
        if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
            return None

        existing = await self.get_user_by_email(settings.ADMIN_EMAIL)
        if existing:
            return existing

        admin = User(
            name=settings.ADMIN_NAME,
            email=settings.ADMIN_EMAIL.lower(),
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            is_active=True
        )
        self.db.add(admin)
        await self.db.commit()
        await self.db.refresh(admin)
        logger.info(f"Bootstrap admin {admin.email} created")
        return admin
