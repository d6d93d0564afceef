"""SQL implementation of the credential store.

This module provides the `ICredentialStore` adapter backed by SQLAlchemy async
sessions. The unique index on ``users.email`` makes ``create`` an atomic
create-if-absent, and conditional ``UPDATE ... WHERE`` statements give
``update`` its compare-and-set semantics without holding row locks across
service calls.
"""

from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy import update as sql_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from src.core.exceptions import ConflictError
from src.domain.entities.user import User
from src.domain.interfaces.repositories import ICredentialStore
from src.domain.value_objects.email import mask_email

logger = get_logger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "email",
        "phone",
        "location",
        "address",
        "avatar",
        "hashed_password",
        "reset_code",
        "reset_code_expires_at",
        "updated_at",
    }
)


class SQLCredentialStore(ICredentialStore):
    """SQLAlchemy implementation of `ICredentialStore`.

    Args:
        db_session: The request-scoped async session. The store commits its own
            writes; reads never open a transaction that outlives the call.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            statement = select(User).where(User.email == email)
            result = await self.db_session.execute(statement)
            user = result.scalars().first()
            logger.debug(
                "User lookup by email completed",
                email=mask_email(email),
                found=user is not None,
                operation="find_by_email",
            )
            return user
        except Exception as e:
            logger.error(
                "Error retrieving user by email",
                email=mask_email(email),
                error=str(e),
                error_type=type(e).__name__,
                operation="find_by_email",
            )
            raise

    async def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            statement = select(User).where(User.id == user_id)
            result = await self.db_session.execute(statement)
            user = result.scalars().first()
            logger.debug(
                "User lookup by ID completed",
                user_id=user_id,
                found=user is not None,
                operation="find_by_id",
            )
            return user
        except Exception as e:
            logger.error(
                "Error retrieving user by ID",
                user_id=user_id,
                error=str(e),
                error_type=type(e).__name__,
                operation="find_by_id",
            )
            raise

    async def create(self, user: User) -> User:
        """Insert ``user``; the unique email index rejects duplicates.

        Raises:
            ConflictError: If a user with the same email already exists.
        """
        try:
            self.db_session.add(user)
            await self.db_session.commit()
            await self.db_session.refresh(user)
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.info(
                "User insert rejected by unique constraint",
                email=mask_email(user.email),
                operation="create",
            )
            raise ConflictError() from e
        except Exception as e:
            await self.db_session.rollback()
            logger.error(
                "Error creating user",
                email=mask_email(user.email),
                error=str(e),
                error_type=type(e).__name__,
                operation="create",
            )
            raise

        logger.debug("User created", user_id=user.id, operation="create")
        return user

    async def update(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[User]:
        """Apply ``fields`` in a single conditional UPDATE.

        Returns:
            The refreshed user, or ``None`` when no row matched.

        Raises:
            ValueError: If a field name is not an updatable column.
            ConflictError: If the new email collides with another user.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if expected:
            unknown |= set(expected) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        if not fields:
            return await self.find_by_id(user_id)

        conditions = [User.id == user_id]
        for name, value in (expected or {}).items():
            column = getattr(User, name)
            conditions.append(column.is_(None) if value is None else column == value)

        statement = (
            sql_update(User)
            .where(*conditions)
            .values(**dict(fields))
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db_session.execute(statement)
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.info("User update rejected by unique constraint", user_id=user_id, operation="update")
            raise ConflictError() from e
        except Exception as e:
            await self.db_session.rollback()
            logger.error(
                "Error updating user",
                user_id=user_id,
                fields=sorted(fields),
                error=str(e),
                error_type=type(e).__name__,
                operation="update",
            )
            raise

        if result.rowcount == 0:
            logger.debug(
                "Conditional update matched no row",
                user_id=user_id,
                expected=sorted(expected or {}),
                operation="update",
            )
            return None

        refreshed = await self.db_session.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        logger.debug("User updated", user_id=user_id, fields=sorted(fields), operation="update")
        return refreshed.scalars().first()
