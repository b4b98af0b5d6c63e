"""
Unit tests for AuthService (registration, login, token issuance).
"""

from unittest.mock import patch

import pytest

from src.api.errors import BadRequestError, NotFoundError
from src.api.models.user import UserRole
from src.api.services.auth import AuthService, parse_role


class TestRegister:
    @pytest.mark.parametrize("role", ["USER", "DRIVER"])
    def test_register_returns_token_bound_to_username_and_role(self, auth_service, tokens, role):
        result = auth_service.register("dana", "s3cret", role)

        assert result.username == "dana"
        assert result.role == UserRole(role)
        payload = tokens.decode(result.token)
        assert payload["sub"] == "dana"
        assert payload["role"] == role

    def test_register_stores_hash_not_plaintext(self, auth_service, user_repo, hasher):
        auth_service.register("dana", "s3cret", "USER")

        user = user_repo.find_by_username("dana")
        assert user is not None
        assert user.id is not None
        assert user.password_hash != "s3cret"
        assert hasher.verify("s3cret", user.password_hash)

    def test_duplicate_username_is_rejected(self, auth_service):
        auth_service.register("dana", "s3cret", "USER")

        with pytest.raises(BadRequestError) as exc_info:
            auth_service.register("dana", "other", "DRIVER")

        assert exc_info.value.message == "Username already exists"

    @pytest.mark.parametrize("role", ["ADMIN", "user", "Driver", "ROLE_USER", ""])
    def test_invalid_role_is_rejected_and_nothing_stored(self, auth_service, user_repo, role):
        with pytest.raises(BadRequestError) as exc_info:
            auth_service.register("erin", "s3cret", role)

        assert exc_info.value.message == "Role must be USER or DRIVER"
        assert not isinstance(exc_info.value, NotFoundError)
        assert user_repo.exists_by_username("erin") is False

    def test_concurrent_duplicate_insert_reports_username_taken(self, auth_service, user_repo):
        auth_service.register("dana", "s3cret", "USER")

        # Simulate a second registration that passed the existence check before the first committed.
        with patch.object(user_repo, "exists_by_username", return_value=False):
            with pytest.raises(BadRequestError) as exc_info:
                auth_service.register("dana", "other", "USER")

        assert exc_info.value.message == "Username already exists"
        # The session is usable again after the rollback.
        assert user_repo.find_by_username("dana").role == UserRole.USER


class TestLogin:
    def test_login_with_correct_password(self, auth_service, tokens):
        auth_service.register("dana", "s3cret", "DRIVER")

        result = auth_service.login("dana", "s3cret")

        assert result.username == "dana"
        assert result.role == UserRole.DRIVER
        payload = tokens.decode(result.token)
        assert payload["sub"] == "dana"
        assert payload["role"] == "DRIVER"

    def test_wrong_password_and_unknown_user_are_indistinguishable(self, auth_service):
        auth_service.register("dana", "s3cret", "USER")

        with pytest.raises(BadRequestError) as wrong_password:
            auth_service.login("dana", "nope")
        with pytest.raises(BadRequestError) as unknown_user:
            auth_service.login("nobody", "s3cret")

        assert type(wrong_password.value) is type(unknown_user.value)
        assert wrong_password.value.message == unknown_user.value.message == "Invalid credentials"
        assert wrong_password.value.code == unknown_user.value.code

    def test_unknown_user_still_pays_hashing_cost(self, user_repo, hasher, tokens):
        class CountingHasher:
            def __init__(self, inner):
                self.inner = inner
                self.checks = 0

            def hash(self, password):
                return self.inner.hash(password)

            def verify(self, password, password_hash):
                self.checks += 1
                return self.inner.verify(password, password_hash)

            def dummy_verify(self):
                self.checks += 1
                return self.inner.dummy_verify()

        counting = CountingHasher(hasher)
        service = AuthService(users=user_repo, hasher=counting, tokens=tokens)
        service.register("dana", "s3cret", "USER")

        with pytest.raises(BadRequestError):
            service.login("dana", "nope")
        wrong_password_checks = counting.checks

        counting.checks = 0
        with pytest.raises(BadRequestError):
            service.login("nobody", "s3cret")

        assert wrong_password_checks == 1
        assert counting.checks >= 1

    def test_login_uses_injected_collaborators(self, user_repo, hasher):
        class StubIssuer:
            def __init__(self):
                self.calls = []

            def issue(self, username, role):
                self.calls.append((username, role))
                return f"token-{len(self.calls)}"

        issuer = StubIssuer()
        service = AuthService(users=user_repo, hasher=hasher, tokens=issuer)
        service.register("dana", "s3cret", "USER")

        first = service.login("dana", "s3cret")
        second = service.login("dana", "s3cret")

        assert first.token == "token-2"
        assert second.token == "token-3"
        assert issuer.calls == [("dana", UserRole.USER)] * 3


def test_parse_role_accepts_exact_values_only():
    assert parse_role("USER") is UserRole.USER
    assert parse_role("DRIVER") is UserRole.DRIVER
    with pytest.raises(BadRequestError):
        parse_role("driver")
