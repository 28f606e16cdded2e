import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.database import transaction
from ..core.exceptions import ConflictError, NotFoundError
from ..core.security import AuthorizationError, UserRole
from ..models.user import User
from ..repositories.user import UserRepository
from ..schemas.auth import UserUpdate

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session, log: logging.Logger = None):
        self.db = db
        self.repo = UserRepository()
        self.log = log or logger

    def list_users(self, role: Optional[UserRole] = None,
                   skip: int = 0, limit: int = 100) -> List[User]:
        return self.repo.list(self.db, role, skip, limit)

    def get_user(self, current_user: User, user_id: int) -> User:
        if current_user.role != UserRole.ADMIN and current_user.id != user_id:
            raise AuthorizationError("Not authorized to view this user")
        user = self.repo.get(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user: User, data: UserUpdate) -> User:
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "phone"
        }
        new_email = updates.get("email")
        if new_email and new_email != user.email:
            if self.repo.get_by_email(self.db, new_email):
                raise ConflictError("Email already registered")

        with transaction(self.db):
            for key, value in updates.items():
                setattr(user, key, value)
        self.db.refresh(user)
        return user

    def set_active(self, user_id: int, is_active: bool) -> User:
        user = self.repo.get(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")

        with transaction(self.db):
            user.is_active = is_active
        self.db.refresh(user)
        self.log.info(f"User id={user_id} {'activated' if is_active else 'deactivated'}")
        return user
