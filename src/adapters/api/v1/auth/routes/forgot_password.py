from __future__ import annotations

"""/auth/forgot-password route module."""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import ForgotPasswordRequest, MessageResponse
from src.infrastructure.dependency_injection.auth_dependencies import CleanAuthService

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Request a password reset code",
    description="Generates a six-digit code valid for one hour and emails it to the user.",
)
async def forgot_password(
    payload: ForgotPasswordRequest, auth_service: CleanAuthService
) -> MessageResponse:
    ack = await auth_service.request_password_reset(payload.email)
    return MessageResponse(message=ack.message)
