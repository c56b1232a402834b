"""
Authentication endpoints for API v1.

Customers register and log in here; both return a bearer token to be
sent as ``Authorization: Bearer <token>`` on protected routes.
Administrator accounts are created with the seed command, never
through registration.
"""

from fastapi import APIRouter, Depends, status

from service_booking_api.app.api.deps import get_user_service
from service_booking_api.app.core.security import get_current_user
from service_booking_api.app.schemas.user import TokenResponse, UserLogin, UserRead, UserRegister
from service_booking_api.app.services.user_service import UserService, user_to_read


router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserRegister,
    users: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Register a customer account and return a token for it."""
    return await users.register(data)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: UserLogin,
    users: UserService = Depends(get_user_service),
) -> TokenResponse:
    return await users.login(data)


@router.get("/me", response_model=UserRead)
async def me(current_user: dict = Depends(get_current_user)) -> UserRead:
    return user_to_read(current_user)
