from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.dependencies import get_current_active_user, require_admin
from app.core.responses import APIResponse
from app.modules.users.models import User
from app.modules.users import schemas
from app.modules.users.services import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_payload(user: User) -> schemas.AuthPayload:
    return schemas.AuthPayload(
        token=UserService.issue_token(user),
        user=schemas.UserResponse.model_validate(user)
    )


@router.post("/register", response_model=APIResponse[schemas.AuthPayload], status_code=status.HTTP_201_CREATED)
async def register(
    data: schemas.RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new account.

    - Email must be unique
    - Role is limited to user/farmer
    - Returns a JWT access token and the profile
    """
    user = await UserService(db).register(data)
    return APIResponse(message="User registered successfully", data=_auth_payload(user))


@router.post("/login", response_model=APIResponse[schemas.AuthPayload])
async def login(
    data: schemas.LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Login with email and password"""
    user = await UserService(db).authenticate(data.email, data.password)
    return APIResponse(message="Login successful", data=_auth_payload(user))


@router.get("/profile", response_model=APIResponse[schemas.UserResponse])
async def get_profile(current_user: User = Depends(get_current_active_user)):
    return APIResponse(data=schemas.UserResponse.model_validate(current_user))


@router.put("/profile", response_model=APIResponse[schemas.UserResponse])
async def update_profile(
    data: schemas.ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    user = await UserService(db).update_profile(current_user, data)
    return APIResponse(message="Profile updated successfully", data=schemas.UserResponse.model_validate(user))


@router.put("/change-password", response_model=APIResponse)
async def change_password(
    data: schemas.ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await UserService(db).change_password(current_user, data)
    return APIResponse(message="Password changed successfully")


# Admin user management

@router.get("/users", response_model=APIResponse[List[schemas.UserResponse]])
async def list_users(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin)
):
    users = await UserService(db).list_users()
    return APIResponse(
        count=len(users),
        data=[schemas.UserResponse.model_validate(u) for u in users]
    )


@router.delete("/users/{user_id}", response_model=APIResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin)
):
    await UserService(db).delete_user(user_id, admin)
    return APIResponse(message="User deleted successfully")


@router.patch("/users/{user_id}/status", response_model=APIResponse[schemas.UserResponse])
async def update_user_status(
    user_id: int,
    data: Optional[schemas.UserStatusUpdate] = None,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Activate or deactivate a user; an empty body toggles the current state"""
    user = await UserService(db).set_user_status(user_id, data.is_active if data else None, admin)
    state = "activated" if user.is_active else "deactivated"
    return APIResponse(message=f"User {state} successfully", data=schemas.UserResponse.model_validate(user))
