"""Authentication and credential-lifecycle service.

Orchestrates password hashing, session tokens, reset codes and federated
identity against the credential store. Every operation either returns a value
object or raises a typed `MarketHubError`; unexpected store or mail failures
are wrapped at this boundary so their details never reach a caller.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, Optional, Type

import structlog

from src.core.config.auth import AuthSettings
from src.core.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    InvalidResetCodeError,
    MarketHubError,
    NotificationError,
    ServerError,
    UserNotFoundError,
    ValidationError,
)
from src.domain.entities.user import SELF_ASSIGNABLE_ROLES, Role, User
from src.domain.interfaces.repositories import ICredentialStore
from src.domain.interfaces.services import IFederatedIdentityVerifier, INotificationSender
from src.domain.services.auth.password_hasher import PasswordHasher
from src.domain.services.auth.reset_code import ResetCodeManager
from src.domain.services.auth.token import TokenIssuer
from src.domain.value_objects.auth_result import Acknowledgement, AuthResult, ProfileUpdate
from src.domain.value_objects.email import Email, mask_email
from src.domain.value_objects.public_user import PublicUser

logger = structlog.get_logger(__name__)

RESET_CODE_SENT = "Reset code sent to email"
RESET_CODE_VERIFIED = "Reset code verified"
PASSWORD_RESET_DONE = "Password reset successful"

REQUIRED_FIELD = "This field is required."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def _collaborator_errors(
    operation: str, error_cls: Type[ServerError] = DatabaseError
) -> Iterator[None]:
    """Re-raise non-domain collaborator failures as a `ServerError`."""
    try:
        yield
    except MarketHubError:
        raise
    except Exception as e:
        logger.error(
            "Collaborator failure",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise error_cls() from e


class AuthService:
    """Implements registration, login, federated login, password reset and
    profile update.

    Attributes:
        store (ICredentialStore): Credential persistence.
        hasher (PasswordHasher): Password hashing.
        tokens (TokenIssuer): Session token issuance.
        reset_codes (ResetCodeManager): Reset code generation and validation.
        verifier (IFederatedIdentityVerifier): Third-party assertion checks.
        notifier (INotificationSender): Reset code delivery.
    """

    def __init__(
        self,
        store: ICredentialStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        reset_codes: ResetCodeManager,
        verifier: IFederatedIdentityVerifier,
        notifier: INotificationSender,
        settings: AuthSettings,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.reset_codes = reset_codes
        self.verifier = verifier
        self.notifier = notifier
        self._password_token_ttl = settings.password_token_ttl
        self._federated_token_ttl = settings.federated_token_ttl
        self._clock = clock

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        phone: Optional[str],
        role: Optional[str] = None,
        location: Optional[str] = None,
    ) -> AuthResult:
        """Create a password account and sign it in.

        Raises:
            ValidationError: A required field is missing or blank, the email is
                malformed, or the role cannot be self-assigned.
            ConflictError: The email is already registered.
        """
        required = {"name": name, "email": email, "password": password, "phone": phone}
        errors: Dict[str, str] = {
            field: REQUIRED_FIELD
            for field, value in required.items()
            if value is None or not str(value).strip()
        }
        normalized_email: Optional[Email] = None
        if "email" not in errors:
            try:
                normalized_email = Email(email)
            except (TypeError, ValueError) as e:
                errors["email"] = str(e)
        assigned_role = self._resolve_role(role, errors)
        if errors:
            logger.info("Registration rejected", reason="invalid_input", fields=sorted(errors))
            raise ValidationError("All fields are required", errors=errors)

        user = User(
            name=name.strip(),
            email=normalized_email.value,
            phone=phone.strip(),
            location=location,
            role=assigned_role,
            hashed_password=self.hasher.hash(password),
        )
        try:
            with _collaborator_errors("register"):
                user = await self.store.create(user)
        except ConflictError:
            logger.info("Registration rejected", reason="duplicate_email", email=mask_email(user.email))
            raise

        logger.info("User registered", user_id=user.id, role=user.role.value)
        return self._sign_in(user, self._password_token_ttl)

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """Authenticate with email and password.

        Raises:
            InvalidCredentialsError: For an unknown email, a federated-only
                account or a wrong password alike.
        """
        user: Optional[User] = None
        if isinstance(email, str) and email.strip():
            with _collaborator_errors("login"):
                user = await self.store.find_by_email(Email.normalize(email))

        # Always run one bcrypt comparison so all failure paths take equal time.
        digest = user.hashed_password if user is not None else None
        password_ok = self.hasher.verify(password or "", digest)

        if user is None or not user.has_usable_password or not password_ok:
            if user is None:
                reason = "unknown_email"
            elif not user.has_usable_password:
                reason = "no_usable_password"
            else:
                reason = "password_mismatch"
            logger.info("Login failed", reason=reason, email=mask_email(email or ""))
            raise InvalidCredentialsError()

        logger.info("User logged in", user_id=user.id)
        return self._sign_in(user, self._password_token_ttl)

    async def federated_login(self, assertion: Optional[str]) -> AuthResult:
        """Sign in with a third-party identity assertion, provisioning the
        account on first use.

        Raises:
            FederatedIdentityError: The assertion did not verify.
        """
        claims = await self.verifier.verify(assertion)

        with _collaborator_errors("federated_login"):
            user = await self.store.find_by_email(claims.email)
            if user is None:
                user = await self._provision_federated_user(claims.email, claims.display_name, claims.picture)
            elif not user.avatar and claims.picture:
                backfilled = await self.store.update(
                    user.id, {"avatar": claims.picture, "updated_at": self._clock()},
                    expected={"avatar": user.avatar},
                )
                if backfilled is not None:
                    user = backfilled
                    logger.info("Avatar backfilled from identity provider", user_id=user.id)

        logger.info("User logged in via federation", user_id=user.id)
        return self._sign_in(user, self._federated_token_ttl)

    async def _provision_federated_user(
        self, email: str, name: str, picture: Optional[str]
    ) -> User:
        candidate = User(
            name=name,
            email=email,
            role=Role.USER,
            avatar=picture,
            hashed_password=None,
        )
        try:
            user = await self.store.create(candidate)
        except ConflictError:
            # A concurrent login or registration created the account first.
            user = await self.store.find_by_email(email)
            if user is None:
                raise
            return user
        logger.info("User provisioned from identity provider", user_id=user.id)
        return user

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    async def request_password_reset(self, email: Optional[str]) -> Acknowledgement:
        """Generate a reset code, store it with its expiry and mail it.

        Raises:
            UserNotFoundError: No user has this email.
            NotificationError: The code was stored but could not be sent.
        """
        user = await self._find_by_email(email, "request_password_reset")
        if user is None:
            logger.info("Password reset requested for unknown email", email=mask_email(email or ""))
            raise UserNotFoundError()

        code = self.reset_codes.generate()
        now = self._clock()
        expires_at = self.reset_codes.compute_expiry(now)
        with _collaborator_errors("request_password_reset"):
            updated = await self.store.update(
                user.id,
                {"reset_code": code, "reset_code_expires_at": expires_at, "updated_at": now},
            )
        if updated is None:
            raise UserNotFoundError()

        with _collaborator_errors("send_reset_code", NotificationError):
            await self.notifier.send_reset_code(user.email, code)

        logger.info("Password reset code issued", user_id=user.id, expires_at=expires_at.isoformat())
        return Acknowledgement(RESET_CODE_SENT)

    async def verify_reset_code(self, email: Optional[str], code: Optional[str]) -> Acknowledgement:
        """Check a reset code without consuming it.

        Raises:
            InvalidResetCodeError: No user, no pending code, wrong code or expired.
        """
        await self._require_valid_reset_code(email, code, "verify_reset_code")
        return Acknowledgement(RESET_CODE_VERIFIED)

    async def reset_password(
        self, email: Optional[str], code: Optional[str], new_password: Optional[str]
    ) -> Acknowledgement:
        """Consume a reset code and replace the password.

        The new digest is written and the code cleared in one conditional
        update that only applies while the stored code is still the one just
        validated, so a code can complete at most one reset.

        Raises:
            ValidationError: ``new_password`` is missing or blank.
            InvalidResetCodeError: The code is invalid, expired or was consumed
                concurrently.
        """
        if new_password is None or not str(new_password).strip():
            raise ValidationError("New password is required", errors={"newPassword": REQUIRED_FIELD})

        user = await self._require_valid_reset_code(email, code, "reset_password")
        digest = self.hasher.hash(new_password)
        with _collaborator_errors("reset_password"):
            updated = await self.store.update(
                user.id,
                {
                    "hashed_password": digest,
                    "reset_code": None,
                    "reset_code_expires_at": None,
                    "updated_at": self._clock(),
                },
                expected={"reset_code": user.reset_code},
            )
        if updated is None:
            logger.info("Password reset lost a race", reason="code_already_consumed", user_id=user.id)
            raise InvalidResetCodeError()

        logger.info("Password reset completed", user_id=user.id)
        return Acknowledgement(PASSWORD_RESET_DONE)

    async def _require_valid_reset_code(
        self, email: Optional[str], code: Optional[str], operation: str
    ) -> User:
        user = await self._find_by_email(email, operation)
        now = self._clock()
        if user is None or not self.reset_codes.validate(
            user.reset_code, user.reset_code_expires_at, code, now
        ):
            if user is None:
                reason = "unknown_email"
            elif not user.reset_code:
                reason = "no_pending_code"
            else:
                reason = "mismatch_or_expired"
            logger.info("Reset code rejected", operation=operation, reason=reason, email=mask_email(email or ""))
            raise InvalidResetCodeError()
        return user

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def update_profile(self, user_id: str, changes: ProfileUpdate) -> PublicUser:
        """Overwrite only the supplied profile fields of an authenticated user.

        Args:
            user_id: Subject id taken from a verified session token.
            changes: Fields to overwrite; ``None`` or blank leaves a field untouched.

        Raises:
            ValidationError: A supplied email is malformed.
            UserNotFoundError: ``user_id`` does not resolve.
            ConflictError: The new email belongs to another user.
        """
        fields = changes.changes()
        if "email" in fields:
            try:
                fields["email"] = Email(fields["email"]).value
            except (TypeError, ValueError) as e:
                raise ValidationError("Invalid profile update", errors={"email": str(e)}) from e

        with _collaborator_errors("update_profile"):
            user = await self.store.find_by_id(user_id)
            if user is None:
                logger.info("Profile update for unknown user", user_id=user_id)
                raise UserNotFoundError()
            if fields:
                fields["updated_at"] = self._clock()
                updated = await self.store.update(user_id, fields)
                if updated is None:
                    raise UserNotFoundError()
                user = updated

        logger.info("Profile updated", user_id=user.id, fields=sorted(k for k in fields if k != "updated_at"))
        return PublicUser.from_entity(user)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _find_by_email(self, email: Optional[str], operation: str) -> Optional[User]:
        if not isinstance(email, str) or not email.strip():
            return None
        with _collaborator_errors(operation):
            return await self.store.find_by_email(Email.normalize(email))

    @staticmethod
    def _resolve_role(role: Optional[str], errors: Dict[str, str]) -> Role:
        if role is None or role == "":
            return Role.USER
        try:
            resolved = Role(role)
        except ValueError:
            errors["role"] = "Unknown role."
            return Role.USER
        if resolved not in SELF_ASSIGNABLE_ROLES:
            errors["role"] = "This role cannot be self-assigned."
        return resolved

    def _sign_in(self, user: User, ttl) -> AuthResult:
        token = self.tokens.issue(user.id, ttl, now=self._clock())
        return AuthResult(token=token, user=PublicUser.from_entity(user))
