"""
User repository for authentication and account management operations.
Provides secure user operations with password handling and user-type queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from marketplace.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from marketplace.models.user import User, UserType
from typing import Optional, List, Dict, Any, Tuple, Sequence
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication support.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: email, password, name
                      Optional: phone, user_type (defaults to BUYER)

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the email is taken
        """
        try:
            user_data = dict(user_data)
            email = User.validate_email_format(user_data["email"])

            existing_user = await self.get_by_email(email)
            if existing_user:
                raise ValueError(f"User with email {email} already exists")

            password = user_data.pop("password")

            create_data = {
                **user_data,
                "email": email,
                "hashed_password": User.hash_password(password),
                "user_type": user_data.get("user_type", UserType.BUYER),
                "is_active": user_data.get("is_active", True)
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.error(f"User validation failed: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        try:
            normalized_email = email.lower().strip()
            result = await self.db.execute(select(User).where(User.email == normalized_email))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User instance if authentication successful, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.is_active:
            logger.debug(f"Authentication failed: user {email} is inactive")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        logger.info(f"User authenticated successfully: {email}")
        return user

    async def update_user_status(self, user_id: uuid.UUID, is_active: bool) -> Optional[User]:
        """Activate or deactivate a user account."""
        updated_user = await self.update(user_id, {"is_active": is_active})

        if updated_user:
            status = "activated" if is_active else "deactivated"
            logger.info(f"User {updated_user.email} {status}")

        return updated_user

    async def search_users(
        self,
        user_types: Optional[Sequence[UserType]] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[User], int]:
        """
        Search users by type and a free-text term over name, email and phone.

        Returns:
            Tuple of (users for the page, total matches)
        """
        query = select(User)

        if user_types:
            query = query.where(User.user_type.in_(list(user_types)))

        if is_active is not None:
            query = query.where(User.is_active == is_active)

        if search:
            pattern = contains_pattern(search)
            query = query.where(
                or_(
                    User.name.ilike(pattern, escape=LIKE_ESCAPE),
                    User.email.ilike(pattern, escape=LIKE_ESCAPE),
                    User.phone.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        query = query.order_by(User.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def get_active_ids_by_type(self, user_type: UserType) -> List[uuid.UUID]:
        result = await self.db.execute(
            select(User.id).where(User.user_type == user_type, User.is_active.is_(True))
        )
        return list(result.scalars().all())

    async def count_by_type(self) -> Dict[str, int]:
        """Count users grouped by user type."""
        result = await self.db.execute(
            select(User.user_type, func.count(User.id)).group_by(User.user_type)
        )
        counts = {user_type.value: 0 for user_type in UserType}
        for user_type, total in result.all():
            counts[user_type.value] = total
        return counts
