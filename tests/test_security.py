"""
Tests for password hashing and JWT issuance/decoding.
"""

import jwt
import pytest

from src.api.models.user import UserRole
from src.api.security import BcryptPasswordHasher, JwtTokenIssuer


def test_hash_is_salted_and_verifiable():
    hasher = BcryptPasswordHasher(rounds=4)

    first = hasher.hash("s3cret")
    second = hasher.hash("s3cret")

    assert first != second
    assert first.startswith("$2")
    assert hasher.verify("s3cret", first)
    assert not hasher.verify("wrong", first)


def test_token_round_trip_without_store():
    issuer = JwtTokenIssuer(secret_key="k1")

    payload = JwtTokenIssuer(secret_key="k1").decode(issuer.issue("alice", UserRole.DRIVER))

    assert payload["sub"] == "alice"
    assert payload["role"] == "DRIVER"
    assert payload["exp"] > payload["iat"]


def test_role_string_is_accepted():
    issuer = JwtTokenIssuer(secret_key="k1")
    assert issuer.decode(issuer.issue("alice", "USER"))["role"] == "USER"


def test_expired_token_is_rejected():
    issuer = JwtTokenIssuer(secret_key="k1")
    token = issuer.issue("alice", UserRole.USER, expires_minutes=-1)

    with pytest.raises(jwt.ExpiredSignatureError):
        issuer.decode(token)


def test_token_signed_with_other_secret_is_rejected():
    token = JwtTokenIssuer(secret_key="k1").issue("alice", UserRole.USER)

    with pytest.raises(jwt.InvalidSignatureError):
        JwtTokenIssuer(secret_key="k2").decode(token)


def test_dummy_verify_never_matches():
    hasher = BcryptPasswordHasher(rounds=4)
    assert hasher.dummy_verify() is False
