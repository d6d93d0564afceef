"""Export domain entities for use across the application."""

from .user import SELF_ASSIGNABLE_ROLES, Role, User

__all__ = ["User", "Role", "SELF_ASSIGNABLE_ROLES"]
