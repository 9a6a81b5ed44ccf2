"""
User service for profile operations.
"""

from typing import Optional
import structlog

from models.user import UserCreate, UserUpdate, UserResponse, UserRole
from exceptions import ConflictError, UserEmailExistsError, UserNotFoundError
from services.base_repository import BaseRepository

logger = structlog.get_logger(__name__)


class UserService(BaseRepository[UserResponse]):
    """
    User management.

    Emails are stored lowercase and unique.
    """

    table = "profiles"
    response_model = UserResponse
    not_found_error = UserNotFoundError

    def get_all(
        self,
        role: Optional[UserRole] = None,
        email: Optional[str] = None
    ) -> list[UserResponse]:
        query = self._select()
        if role:
            query = query.eq("role", UserRole(role).value)
        if email:
            query = query.eq("email", email.strip().lower())
        return self._run_list(query, role=role)

    def get_by_email(self, email: str) -> Optional[UserResponse]:
        """Get a user by email, None if not registered."""
        users = self.get_all(email=email)
        return users[0] if users else None

    def create(self, data: UserCreate) -> UserResponse:
        """
        Create a user.

        Raises:
            UserEmailExistsError: If the email is already registered
        """
        if self.get_by_email(data.email):
            raise UserEmailExistsError(data.email)

        logger.info("creating_user", email=data.email, role=data.role.value)

        try:
            user = self.insert_row(data.model_dump(mode="json"))
        except ConflictError:
            raise UserEmailExistsError(data.email)

        logger.info("user_created", user_id=user.id)
        return user

    def update(self, user_id: str, data: UserUpdate) -> UserResponse:
        """
        Update a user; only provided fields change.

        Raises:
            UserNotFoundError: If the user does not exist
            UserEmailExistsError: If the new email belongs to another user
        """
        existing = self.get_by_id(user_id)
        patch = data.model_dump(exclude_unset=True, mode="json")

        new_email = patch.get("email")
        if new_email and new_email != existing.email:
            other = self.get_by_email(new_email)
            if other and other.id != user_id:
                raise UserEmailExistsError(new_email)

        logger.info("updating_user", user_id=user_id, fields=list(patch.keys()))

        try:
            return self.update_row(user_id, patch, existing=existing)
        except ConflictError:
            raise UserEmailExistsError(new_email or existing.email)

    def delete(self, user_id: str) -> None:
        self.delete_row(user_id)
        logger.info("user_deleted", user_id=user_id)


# Singleton instance for convenience
_user_service: Optional[UserService] = None


def get_user_service() -> UserService:
    """Get or create UserService instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
