from __future__ import annotations

"""/auth/verify-reset-code route module."""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import MessageResponse, VerifyResetCodeRequest
from src.infrastructure.dependency_injection.auth_dependencies import CleanAuthService

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Check a password reset code",
    description="Confirms a reset code is valid without consuming it.",
)
async def verify_reset_code(
    payload: VerifyResetCodeRequest, auth_service: CleanAuthService
) -> MessageResponse:
    ack = await auth_service.verify_reset_code(payload.email, payload.code)
    return MessageResponse(message=ack.message)
