from __future__ import annotations

"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "register",
    "login",
    "federated_login",
    "forgot_password",
    "verify_reset_code",
    "reset_password",
    "profile",
]
