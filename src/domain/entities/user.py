import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlmodel import Column, Field, SQLModel, String


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_user_id() -> str:
    return uuid.uuid4().hex


class Role(str, Enum):
    """Represents the role of a user within the marketplace.

    Attributes:
        USER: A customer browsing and booking services. The default.
        PROFESSIONAL: A service provider.
        ADMIN: Assigned by operators only; never self-assignable.
    """

    USER = "user"
    PROFESSIONAL = "professional"
    ADMIN = "admin"


SELF_ASSIGNABLE_ROLES = frozenset({Role.USER, Role.PROFESSIONAL})


class User(SQLModel, table=True):
    """Represents a User entity and acts as an Aggregate Root.

    One record exists per distinct email. Accounts are created either through
    password registration or through the first federated login.

    Attributes:
        id: Opaque identifier assigned at creation; never changes.
        name: Display name.
        email: Unique, lower-cased email address used as the lookup key.
        phone: Contact phone. Absent for accounts provisioned by federation.
        location: Free-form location.
        address: Optional postal address.
        avatar: Optional avatar URL.
        hashed_password: Bcrypt digest. ``None`` for federated-only accounts,
            which therefore have no usable password.
        role: The user's marketplace role.
        reset_code: Pending six-digit password reset code.
        reset_code_expires_at: Expiry of ``reset_code``. Set and cleared together
            with it.
        created_at: Creation timestamp.
        updated_at: Timestamp of the last update.
    """

    __tablename__ = "users"

    id: str = Field(
        default_factory=_new_user_id,
        primary_key=True,
        max_length=32,
        description="Opaque unique identifier for the user.",
    )
    name: str = Field(max_length=255)
    email: str = Field(
        sa_column=Column(String(254), unique=True, index=True, nullable=False),
        description="Unique, lower-cased email address.",
    )
    phone: Optional[str] = Field(default=None, max_length=32)
    location: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = Field(default=None, max_length=512)
    avatar: Optional[str] = Field(default=None, max_length=2048)
    hashed_password: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Bcrypt digest. Null for accounts that authenticate only through federation.",
    )
    role: Role = Field(
        default=Role.USER,
        sa_column=Column(
            SAEnum(Role, name="role", values_callable=lambda roles: [r.value for r in roles]),
            nullable=False,
            default=Role.USER,
        ),
    )
    reset_code: Optional[str] = Field(default=None, max_length=6)
    reset_code_expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )

    @property
    def has_usable_password(self) -> bool:
        """False for federated-only accounts; password login must reject them."""
        return self.hashed_password is not None
