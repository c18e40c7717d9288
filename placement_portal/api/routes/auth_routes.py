"""
Authentication Routes

POST /auth/register - Register new user (returns token right away)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
POST /auth/request-password-reset - Record a reset request (nothing is sent)
POST /auth/reset-password - Placeholder, not implemented
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import authenticate, create_access_token, get_current_user, register_user
from placement_portal.core.errors import ValidationError
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.models.entities import User
from placement_portal.schemas.schemas import (
    AuthResponse, LoginRequest, MessageResponse, PasswordResetRequest,
    RegisterRequest, ResetPasswordRequest, UserResponse
)
from placement_portal.services.notification_service import NotificationService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(token=create_access_token(user), user=UserResponse(**user.model_dump()))


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest, store: Store = Depends(get_store)):
    """
    Register a new user account.

    Role is one of TPO / STUDENT / ALUMNI (any casing).
    """
    user = register_user(
        store,
        email=request.email,
        password=request.password,
        role=request.role,
        name=request.name,
        phone=request.phone,
    )
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, store: Store = Depends(get_store)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = authenticate(store, request.email, request.password, request.role)
    return _auth_response(user)


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return UserResponse(**user.model_dump())


@router.post("/request-password-reset", response_model=MessageResponse)
async def request_password_reset(request: PasswordResetRequest, store: Store = Depends(get_store)):
    if not request.email:
        raise ValidationError("Email is required")
    return MessageResponse(message=NotificationService(store).request_password_reset(request.email))


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, store: Store = Depends(get_store)):
    if not request.token or not request.new_password:
        raise ValidationError("Token and new password are required")
    return MessageResponse(message=NotificationService(store).reset_password(request.token, request.new_password))
