"""Tests for the in-memory authentication provider."""

from __future__ import annotations

import pytest

from charsheet.core.exceptions import AuthError
from charsheet.storage.auth import AuthProvider, AuthUser, InMemoryAuthProvider


class TestSignUpAndLogin:
    """Tests for password accounts."""

    def test_sign_up_signs_in(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test a new account becomes the current user."""
        user = auth_provider.sign_up("Thorin@Erebor.example", "arkenstone")

        assert user.email == "thorin@erebor.example"
        assert user.provider == "password"
        assert auth_provider.get_current_user() == user

    def test_login(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test logging back in returns the same user."""
        user = auth_provider.sign_up("bilbo@shire.example", "precious")
        auth_provider.logout()

        assert auth_provider.get_current_user() is None
        assert auth_provider.login("BILBO@shire.example", "precious") == user

    def test_wrong_password(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test a wrong password is rejected."""
        auth_provider.sign_up("bilbo@shire.example", "precious")
        auth_provider.logout()

        with pytest.raises(AuthError, match="Invalid email or password"):
            auth_provider.login("bilbo@shire.example", "ring")
        assert auth_provider.get_current_user() is None

    def test_unknown_account(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test an unknown email is rejected with the same message."""
        with pytest.raises(AuthError, match="Invalid email or password"):
            auth_provider.login("nobody@example.com", "whatever")

    @pytest.mark.parametrize(
        ("email", "password", "message"),
        [
            ("not-an-email", "secret123", "Invalid email address"),
            ("a@b.example", "short", "Password must be at least 6 characters"),
        ],
    )
    def test_sign_up_rejected(
        self, auth_provider: InMemoryAuthProvider, email: str, password: str, message: str
    ) -> None:
        """Test malformed sign-ups."""
        with pytest.raises(AuthError, match=message):
            auth_provider.sign_up(email, password)

    def test_duplicate_email(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test an email can only be registered once."""
        auth_provider.sign_up("a@b.example", "secret123")

        with pytest.raises(AuthError, match="Email already in use"):
            auth_provider.sign_up("A@B.example", "secret456")


class TestGoogleLogin:
    """Tests for token sign-in."""

    def test_stable_uid(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test the same token always maps to the same user."""
        first = auth_provider.google_login("token-abc")
        second = auth_provider.google_login("token-abc")

        assert first == second
        assert first.provider == "google"
        assert first.uid.startswith("google_")
        assert len(first.uid) == len("google_") + 24

    def test_missing_token(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test an empty token is rejected."""
        with pytest.raises(AuthError, match="requires an id token"):
            auth_provider.google_login("")


class TestPasswordReset:
    """Tests for reset requests."""

    def test_records_request(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test a reset for a known account is recorded."""
        auth_provider.sign_up("a@b.example", "secret123")

        auth_provider.reset_password("A@b.example")

        assert auth_provider.password_resets == ["a@b.example"]

    def test_unknown_account(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test resetting an unknown account fails."""
        with pytest.raises(AuthError, match="No account found for email"):
            auth_provider.reset_password("ghost@example.com")


class TestAuthStateListeners:
    """Tests for auth state change subscriptions."""

    def test_notifications(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test listeners see the current state, then every change, until unsubscribed."""
        seen: list[AuthUser | None] = []
        unsubscribe = auth_provider.on_auth_state_changed(seen.append)

        user = auth_provider.sign_up("a@b.example", "secret123")
        auth_provider.logout()
        unsubscribe()
        auth_provider.login("a@b.example", "secret123")

        assert seen == [None, user, None]

    def test_unsubscribe_twice(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test unsubscribing is safe to repeat."""
        unsubscribe = auth_provider.on_auth_state_changed(lambda user: None)

        unsubscribe()
        unsubscribe()

    def test_satisfies_protocol(self, auth_provider: InMemoryAuthProvider) -> None:
        """Test the provider matches the AuthProvider protocol."""
        assert isinstance(auth_provider, AuthProvider)
