from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from app.core.database import get_db
from app.core.exceptions import AuthError, ForbiddenError
from app.core.security import decode_token
from app.modules.users.models import User, UserRole

# auto_error is off so that missing tokens go through the envelope handlers
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user from JWT token"""
    if not token:
        raise AuthError("Not authorized. Please login to access this resource.")

    payload = decode_token(token)
    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise AuthError("Invalid or expired token")

    try:
        user_pk = int(user_id)
    except (TypeError, ValueError):
        raise AuthError("Invalid or expired token")

    result = await db.execute(select(User).where(User.id == user_pk))
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthError("User not found")

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """Ensure user account is active"""
    if not current_user.is_active:
        raise AuthError("User account is disabled")
    return current_user


async def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Get current user if authenticated, otherwise return None"""
    if not token:
        return None

    try:
        user = await get_current_user(token, db)
    except AuthError:
        return None
    return user if user.is_active else None


def require_roles(*roles: UserRole):
    """Dependency factory restricting an endpoint to the given roles"""
    async def checker(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenError(
                f"User role '{current_user.role.value}' is not authorized to access this resource"
            )
        return current_user
    return checker


require_admin = require_roles(UserRole.ADMIN)
