"""
Authentication service for signup, login, token management and profile updates.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import settings
from marketplace.repositories.user import UserRepository
from marketplace.models.user import User, UserType
from marketplace.schemas.user import RegisterRequest, ProfileUpdate, TokenResponse, UserResponse
from marketplace.utils.auth import create_access_token, create_refresh_token, verify_token
from marketplace.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InvalidTokenError,
    InactiveUserError,
    NotFoundError,
    ValidationError,
    BadRequestError,
    DuplicateResourceError,
)
from jose import JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing accounts and issuing the session token pair.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, data: RegisterRequest) -> User:
        """
        Create a buyer, seller or agent account.

        Raises:
            DuplicateResourceError: If the email is already registered
        """
        try:
            if await self.user_repo.get_by_email(data.email):
                raise DuplicateResourceError("User", data.email)

            user = await self.user_repo.create_user({
                "name": data.name,
                "email": data.email,
                "phone": data.phone,
                "password": data.password,
                "user_type": UserType(data.user_type),
            })
            logger.info(f"Registered {user.user_type.value} account: {user.email}")
            return user
        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to register {data.email}: {e}")
            raise BadRequestError(f"Failed to register user: {str(e)}")

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            InvalidCredentialsError: If credentials are invalid or the account is inactive
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")
        if not password:
            raise ValidationError("Password is required")

        user = await self.user_repo.authenticate_user(email, password)
        if not user:
            logger.warning(f"Failed login attempt for {email}")
            raise InvalidCredentialsError()
        return user

    def create_tokens(self, user: User) -> Tuple[str, str]:
        access_token = create_access_token(user.id, user.email, user.user_type.value)
        refresh_token = create_refresh_token(user.id, user.email)
        return access_token, refresh_token

    def build_session(self, user: User) -> TokenResponse:
        """Token pair plus the user, as kept by clients in a single session object."""
        access_token, refresh_token = self.create_tokens(user)
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.access_token_expire_minutes * 60,
            user_type=user.user_type,
            user=UserResponse.model_validate(user.to_dict()),
        )

    async def login(self, email: str, password: str) -> TokenResponse:
        user = await self.authenticate_user(email, password)
        logger.info(f"User logged in: {user.email}")
        return self.build_session(user)

    async def refresh_session(self, refresh_token: str) -> TokenResponse:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            InvalidTokenError: If the token is invalid, expired or not a refresh token
        """
        try:
            payload = verify_token(refresh_token, token_type="refresh")
        except JWTError as e:
            raise InvalidTokenError(f"Invalid refresh token: {str(e)}")

        user = await self.user_repo.get_by_id(uuid.UUID(payload.user_id))
        if not user:
            raise InvalidTokenError("User no longer exists")
        if not user.is_active:
            raise InactiveUserError()

        return self.build_session(user)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            InvalidTokenError: If the token is invalid or expired
            InactiveUserError: If the account is inactive
        """
        try:
            payload = verify_token(token, token_type="access")
        except JWTError as e:
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        user = await self.user_repo.get_by_id(uuid.UUID(payload.user_id))
        if not user:
            raise InvalidTokenError("User no longer exists")
        if not user.is_active:
            raise InactiveUserError()
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise ValidationError("No valid fields provided for update")
        updated = await self.user_repo.save(user, changes)
        logger.info(f"Profile updated for {updated.email}")
        return updated

    async def set_user_status(self, user_id: uuid.UUID, is_active: bool, current_user: User) -> User:
        """Soft activate/deactivate an account; admins cannot deactivate themselves."""
        if user_id == current_user.id and not is_active:
            raise BadRequestError("You cannot deactivate your own account")

        user = await self.user_repo.update_user_status(user_id, is_active)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def list_users(
        self,
        user_type: Optional[UserType] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ):
        return await self.user_repo.search_users(
            user_types=[user_type] if user_type else None,
            search=search,
            skip=skip,
            limit=limit,
        )
