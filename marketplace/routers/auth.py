"""
Authentication API endpoints for signup, login, token refresh and the current profile.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from marketplace.models.user import User
from marketplace.services import AuthService
from marketplace.services import mailer
from marketplace.schemas.common import ApiResponse, error_responses
from marketplace.schemas.user import (
    RegisterRequest,
    LoginRequest,
    RefreshTokenRequest,
    TokenResponse,
    UserResponse,
    ProfileUpdate,
)
from marketplace.utils.dependencies import get_auth_service, get_current_active_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=ApiResponse[TokenResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses=error_responses(409, 422)
)
async def register(
    data: RegisterRequest,
    background_tasks: BackgroundTasks,
    auth_service: AuthService = Depends(get_auth_service)
) -> ApiResponse[TokenResponse]:
    """
    Register a buyer, seller or agent and sign them in.
    A welcome email is sent after the response.
    """
    user = await auth_service.register(data)
    background_tasks.add_task(mailer.send_welcome, user.email, user.name, user.user_type.value)
    return ApiResponse(data=auth_service.build_session(user), message="Registration successful")


@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    summary="User login",
    description="Authenticate with email and password and receive the session token pair",
    responses=error_responses(401, 422)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> ApiResponse[TokenResponse]:
    session = await auth_service.login(email=login_data.email, password=login_data.password)
    return ApiResponse(data=session, message="Login successful")


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenResponse],
    summary="Refresh tokens",
    responses=error_responses(401)
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> ApiResponse[TokenResponse]:
    return ApiResponse(data=await auth_service.refresh_session(refresh_data.refresh_token))


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Get current user",
    responses=error_responses(401)
)
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.model_validate(current_user.to_dict()))


@router.put(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Update profile",
    responses=error_responses(401, 422)
)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> ApiResponse[UserResponse]:
    user = await auth_service.update_profile(current_user, data)
    return ApiResponse(data=UserResponse.model_validate(user.to_dict()), message="Profile updated")
