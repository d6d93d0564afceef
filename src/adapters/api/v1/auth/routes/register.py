from __future__ import annotations

"""/auth/register route module.

Creates a password account and returns a session token for it. Duplicate
emails and incomplete payloads are rejected with 400 by the central handlers.
"""

import structlog
from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import AuthResponse, RegisterRequest
from src.infrastructure.dependency_injection.auth_dependencies import CleanAuthService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Creates a user account with name, email, password and phone, and signs it in.",
)
async def register_user(payload: RegisterRequest, auth_service: CleanAuthService) -> AuthResponse:
    """Register a new user.

    Args:
        payload (RegisterRequest): User registration data
        auth_service (AuthService): Injected authentication service

    Returns:
        AuthResponse: The session token and the new user's public profile
    """
    result = await auth_service.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        phone=payload.phone,
        role=payload.role,
        location=payload.location,
    )
    return AuthResponse.from_result(result)
