from __future__ import annotations

"""/auth/google route module.

Signs a user in with a Google ID token, creating the account on first use.
"""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import AuthResponse, FederatedLoginRequest
from src.infrastructure.dependency_injection.auth_dependencies import CleanAuthService

router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate with a Google ID token",
    description="Verifies the ID token and returns a 7 day session token.",
)
async def federated_login(
    payload: FederatedLoginRequest, auth_service: CleanAuthService
) -> AuthResponse:
    result = await auth_service.federated_login(payload.assertion)
    return AuthResponse.from_result(result)
