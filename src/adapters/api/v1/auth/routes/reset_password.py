from __future__ import annotations

"""/auth/reset-password route module."""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import MessageResponse, ResetPasswordRequest
from src.infrastructure.dependency_injection.auth_dependencies import CleanAuthService

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Reset a password with a reset code",
    description="Consumes the reset code and sets the new password. A code works once.",
)
async def reset_password(
    payload: ResetPasswordRequest, auth_service: CleanAuthService
) -> MessageResponse:
    ack = await auth_service.reset_password(payload.email, payload.code, payload.new_password)
    return MessageResponse(message=ack.message)
