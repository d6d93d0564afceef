"""Credential store implementations for the infrastructure layer."""

from .in_memory import InMemoryCredentialStore
from .user_repository import SQLCredentialStore

__all__ = ["InMemoryCredentialStore", "SQLCredentialStore"]
