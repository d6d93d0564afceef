from __future__ import annotations

"""/auth/profile route module.

Requires a bearer session token; the user id comes from the verified token,
never from the payload.
"""

from fastapi import APIRouter, status

from src.adapters.api.v1.auth.schemas import ProfileResponse, UpdateProfileRequest, UserOut
from src.core.dependencies.auth import CurrentUserId
from src.domain.value_objects.auth_result import ProfileUpdate
from src.infrastructure.dependency_injection.auth_dependencies import CleanAuthService

router = APIRouter()


@router.put(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Update the current user's profile",
    description="Overwrites only the supplied fields among name, email, phone, address and location.",
)
async def update_profile(
    payload: UpdateProfileRequest,
    user_id: CurrentUserId,
    auth_service: CleanAuthService,
) -> ProfileResponse:
    changes = ProfileUpdate(**payload.model_dump(exclude_unset=True))
    user = await auth_service.update_profile(user_id, changes)
    return ProfileResponse(user=UserOut.from_public_user(user))
