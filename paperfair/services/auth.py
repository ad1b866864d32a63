import hmac
from dataclasses import dataclass
from typing import Optional

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy.exc import IntegrityError

from ..errors import Forbidden, InvalidCredentials, ServiceError, Unauthenticated
from ..models.user import User

ADMIN_DISPLAY_NAME = "System Administrator"
ADMIN_STUDENT_ID = "ADMIN001"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an admin credential check: exactly one of user/error is set."""
    user: Optional[User] = None
    error: Optional[ServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, user: User) -> "AuthResult":
        return cls(user=user)

    @classmethod
    def failure(cls, error: ServiceError) -> "AuthResult":
        return cls(error=error)


def bearer_credential(header_value: Optional[str]) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer <token>` header value."""
    if not header_value:
        return None
    scheme, _, token = header_value.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _same(given: str, expected: str) -> bool:
    return hmac.compare_digest((given or "").encode("utf-8"), (expected or "").encode("utf-8"))


class AdminAuthGate:
    def __init__(self, store, admin_email: str, admin_password: str, account_domain: str = "admin.local"):
        self.store = store
        self._admin_email = admin_email
        self._admin_password = admin_password
        self.account_email = f"{admin_email}@{account_domain}"

    def login(self, email: str, password: str):
        """
        Exchange the fixed admin credential pair for a signed access token.
        Returns (token, user).
        """
        # Evaluate both comparisons so timing doesn't reveal which part failed
        email_ok = _same(email, self._admin_email)
        password_ok = _same(password, self._admin_password)
        if not (email_ok and password_ok):
            current_app.logger.info("Admin login rejected for %r", email)
            raise InvalidCredentials()

        user = self.ensure_admin_account()
        token = create_access_token(
            identity=str(user.id),
            additional_claims={"email": user.email, "is_admin": True},
        )
        current_app.logger.info("Admin login succeeded user=%s", user.id)
        return token, user

    def ensure_admin_account(self) -> User:
        user = self.store.find_user_by_email(self.account_email)
        if user and user.is_admin:
            return user

        try:
            with self.store.transaction():
                if user is None:
                    student_id = ADMIN_STUDENT_ID
                    if self.store.find_user_by_student_id(student_id):
                        student_id = None
                    user = self.store.add(User(
                        email=self.account_email,
                        name=ADMIN_DISPLAY_NAME,
                        student_id=student_id,
                        is_admin=True,
                    ))
                    current_app.logger.info("Bootstrapped admin account %s", user.email)
                else:
                    user.is_admin = True
                    current_app.logger.warning("Restored admin flag on %s", user.email)
        except IntegrityError:
            # Concurrent first logins; the other request created it
            user = self.store.find_user_by_email(self.account_email)
            if user is None:
                raise
        return user

    def authenticate_admin(self, credential: Optional[str]) -> AuthResult:
        if not credential:
            return AuthResult.failure(Unauthenticated("Missing bearer token"))

        try:
            claims = decode_token(credential)
        except (JWTExtendedException, PyJWTError) as e:
            current_app.logger.debug("Admin token rejected: %s", e)
            return AuthResult.failure(Unauthenticated("Invalid or expired token"))

        subject = claims.get(current_app.config.get("JWT_IDENTITY_CLAIM", "sub"))
        user = self.store.get_user(subject) if subject else None
        if user is None:
            return AuthResult.failure(Unauthenticated("Token subject not found"))

        if not user.is_admin:
            return AuthResult.failure(Forbidden("Administrator privileges required"))

        return AuthResult.success(user)
