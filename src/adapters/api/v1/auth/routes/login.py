from __future__ import annotations

"""/auth/login route module."""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import AuthResponse, LoginRequest
from src.infrastructure.dependency_injection.auth_dependencies import CleanAuthService

router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate with email and password",
    description=(
        "Returns a 24 hour session token. Every failure, whatever its cause, "
        "yields the same 400 response."
    ),
)
async def login_user(payload: LoginRequest, auth_service: CleanAuthService) -> AuthResponse:
    result = await auth_service.login(payload.email, payload.password)
    return AuthResponse.from_result(result)
