from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...core.security import UserRole
from ...api.deps import get_current_user, get_admin_user
from ...services.user_service import UserService
from ...schemas.auth import UserResponse, UserUpdate
from ...models.user import User

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    _: User = Depends(get_admin_user)
):
    """List users, optionally filtered by role (admin only)."""
    return UserService(db).list_users(role, skip, limit)

@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    profile: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update the caller's contact details."""
    return UserService(db).update_profile(current_user, profile)

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a user (admin, or the user themselves)."""
    return UserService(db).get_user(current_user, user_id)

@router.patch("/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: int,
    is_active: bool,
    db: Session = Depends(get_db),
    _: User = Depends(get_admin_user)
):
    """Activate or deactivate a user account (admin only)."""
    return UserService(db).set_active(user_id, is_active)
