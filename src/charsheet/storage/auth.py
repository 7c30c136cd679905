"""Authentication collaborators.

The rules core never authenticates anyone; the repository only asks an
``AuthProvider`` who is signed in, to decide which stored characters
that user may read or change.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable
from uuid import uuid4

from charsheet.core.exceptions import AuthError
from charsheet.core.logging import get_logger


logger = get_logger(__name__)

PASSWORD_HASH_ITERATIONS = 200_000
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthUser:
    """A signed-in user.

    Attributes:
        uid: Stable user id; stored characters are owned by it.
        email: Email address, if the sign-in method provides one.
        provider: Sign-in method ('password' or 'google').
    """

    uid: str
    email: str | None = None
    provider: str = "password"


AuthStateCallback = Callable[[AuthUser | None], None]


@runtime_checkable
class AuthProvider(Protocol):
    """What the storage layer needs from an authentication service."""

    def sign_up(self, email: str, password: str) -> AuthUser: ...

    def login(self, email: str, password: str) -> AuthUser: ...

    def google_login(self, id_token: str) -> AuthUser: ...

    def logout(self) -> None: ...

    def reset_password(self, email: str) -> None: ...

    def get_current_user(self) -> AuthUser | None: ...

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]: ...


# =============================================================================
# In-memory Provider
# =============================================================================


@dataclass
class _Account:
    user: AuthUser
    salt: bytes
    password_hash: bytes


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS)


class InMemoryAuthProvider:
    """Process-local accounts with salted PBKDF2 password hashes.

    Suitable for tests and single-user local use. Google sign-in trusts
    the token it is given and derives a stable user id from it.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, _Account] = {}
        self._current: AuthUser | None = None
        self._listeners: list[AuthStateCallback] = []
        self.password_resets: list[str] = []

    def sign_up(self, email: str, password: str) -> AuthUser:
        """Create an account and sign it in.

        Raises:
            AuthError: If the email is malformed or taken, or the password is too short.
        """
        key = email.strip().lower()
        if "@" not in key:
            raise AuthError("Invalid email address", email=email)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                email=email,
            )
        if key in self._accounts:
            raise AuthError("Email already in use", email=email)

        salt = secrets.token_bytes(16)
        user = AuthUser(uid=uuid4().hex, email=key)
        self._accounts[key] = _Account(user=user, salt=salt, password_hash=_hash_password(password, salt))
        logger.info("User signed up", uid=user.uid)
        self._set_current(user)
        return user

    def login(self, email: str, password: str) -> AuthUser:
        """Sign in with email and password.

        Raises:
            AuthError: If the credentials do not match an account.
        """
        account = self._accounts.get(email.strip().lower())
        if account is None or not hmac.compare_digest(
            account.password_hash, _hash_password(password, account.salt)
        ):
            raise AuthError("Invalid email or password", email=email)
        self._set_current(account.user)
        return account.user

    def google_login(self, id_token: str) -> AuthUser:
        if not id_token:
            raise AuthError("Google sign-in requires an id token")
        digest = hashlib.sha256(id_token.encode("utf-8")).hexdigest()
        user = AuthUser(uid=f"google_{digest[:24]}", provider="google")
        self._set_current(user)
        return user

    def logout(self) -> None:
        self._set_current(None)

    def reset_password(self, email: str) -> None:
        """Record a reset request for an existing account.

        Raises:
            AuthError: If no account uses the email.
        """
        key = email.strip().lower()
        if key not in self._accounts:
            raise AuthError("No account found for email", email=email)
        self.password_resets.append(key)
        logger.info("Password reset requested", uid=self._accounts[key].user.uid)

    def get_current_user(self) -> AuthUser | None:
        return self._current

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]:
        """Call ``callback`` now and on every sign-in or sign-out.

        Returns:
            A function that stops further calls.
        """
        self._listeners.append(callback)
        callback(self._current)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_current(self, user: AuthUser | None) -> None:
        self._current = user
        for listener in list(self._listeners):
            listener(user)


__all__ = [
    "AuthUser",
    "AuthStateCallback",
    "AuthProvider",
    "InMemoryAuthProvider",
]
