"""In-process credential store.

Keeps users in a dictionary guarded by an `asyncio.Lock`, so the atomic
create-if-absent and compare-and-set guarantees hold across coroutines of one
event loop. Used by the test-suite and for local runs without a database.
"""

import asyncio
from typing import Any, Dict, Mapping, Optional

from structlog import get_logger

from src.core.exceptions import ConflictError
from src.domain.entities.user import User
from src.domain.interfaces.repositories import ICredentialStore

logger = get_logger(__name__)


def _clone(user: User) -> User:
    # Callers must never hold a reference to the stored record.
    return User(**user.model_dump())


class InMemoryCredentialStore(ICredentialStore):
    def __init__(self):
        self._users: Dict[str, User] = {}
        self._lock = asyncio.Lock()

    async def find_by_email(self, email: str) -> Optional[User]:
        async with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return _clone(user)
        return None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        async with self._lock:
            user = self._users.get(user_id)
            return _clone(user) if user is not None else None

    async def create(self, user: User) -> User:
        async with self._lock:
            if any(existing.email == user.email for existing in self._users.values()):
                raise ConflictError()
            stored = _clone(user)
            self._users[stored.id] = stored
            logger.debug("User created", user_id=stored.id, operation="create")
            return _clone(stored)

    async def update(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[User]:
        async with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            for name, value in (expected or {}).items():
                if getattr(user, name) != value:
                    return None
            new_email = fields.get("email")
            if new_email is not None and any(
                other.email == new_email and other.id != user_id for other in self._users.values()
            ):
                raise ConflictError()
            for name, value in fields.items():
                setattr(user, name, value)
            return _clone(user)

    def __len__(self) -> int:
        return len(self._users)
