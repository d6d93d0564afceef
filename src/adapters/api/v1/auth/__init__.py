from __future__ import annotations

"""Authentication router package – bundles registration, login, reset and profile endpoints."""

from fastapi import APIRouter

from .routes import federated_login as federated_login_route
from .routes import forgot_password as forgot_password_route
from .routes import login as login_route
from .routes import profile as profile_route
from .routes import register as register_route
from .routes import reset_password as reset_password_route
from .routes import verify_reset_code as verify_reset_code_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(register_route.router, prefix="/register")
router.include_router(login_route.router, prefix="/login")
router.include_router(federated_login_route.router, prefix="/google")
router.include_router(forgot_password_route.router, prefix="/forgot-password")
router.include_router(verify_reset_code_route.router, prefix="/verify-reset-code")
router.include_router(reset_password_route.router, prefix="/reset-password")
router.include_router(profile_route.router, prefix="/profile")

__all__ = ["router"]
