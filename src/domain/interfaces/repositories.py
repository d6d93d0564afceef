"""Repository interfaces for abstracting data persistence in the domain layer.

This module defines the credential store port. The domain uses it to read and
write users without being coupled to a specific technology. Concrete adapters
(SQL, in-process) live in `src.infrastructure.repositories`.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from src.domain.entities.user import User


class ICredentialStore(ABC):
    """The contract for user persistence operations.

    Two operations carry concurrency guarantees the domain relies on:

    - ``create`` is an atomic create-if-absent keyed on email.
    - ``update`` with ``expected`` is a compare-and-set: the write happens only
      if every expected field still holds the given value.
    """

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Retrieves a user by normalized email address.

        Returns:
            The `User`, or `None` if no user has that email.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Retrieves a user by their identifier.

        Returns:
            The `User`, or `None` if the id does not resolve.
        """
        raise NotImplementedError

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persists a new user if no user with the same email exists.

        Returns:
            The persisted `User`.

        Raises:
            ConflictError: If the email is already taken. Exactly one of any
                number of concurrent creates for the same email succeeds.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[User]:
        """Overwrites ``fields`` on a user as a single atomic write.

        Args:
            user_id: The user to update.
            fields: Attribute names and their new values.
            expected: Optional attribute values that must still be stored for
                the write to happen.

        Returns:
            The updated `User`, or `None` if the user does not exist or an
            expected value no longer matches.

        Raises:
            ConflictError: If the update would duplicate another user's email.
        """
        raise NotImplementedError
