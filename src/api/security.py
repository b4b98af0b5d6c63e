from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional, Protocol

import jwt
from passlib.context import CryptContext

from src.api.config import get_settings
from src.api.models.user import UserRole


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...

    def dummy_verify(self) -> bool: ...


class TokenIssuer(Protocol):
    def issue(self, username: str, role: UserRole) -> str: ...


class BcryptPasswordHasher:
    """Salted one-way password hashing backed by passlib's bcrypt scheme."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        """Hash a plaintext password using bcrypt."""
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a stored hash."""
        return self._context.verify(password, password_hash)

    def dummy_verify(self) -> bool:
        """Spend the same hashing cost as verify() when there is no stored hash to check."""
        return self._context.dummy_verify()


class JwtTokenIssuer:
    """
    Issues and decodes self-contained signed access tokens.

    Payload fields:
    - sub: username
    - role: user role (USER | DRIVER)
    - iat: issued-at (UTC)
    - exp: expiration (UTC)
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def issue(self, username: str, role: UserRole, expires_minutes: Optional[int] = None) -> str:
        """Create a signed JWT binding username and role."""
        expire_in = expires_minutes if expires_minutes is not None else self._expire_minutes
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": username,
            "role": UserRole(role).value,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=expire_in)).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """Decode and validate a JWT token, raising jwt exceptions if invalid."""
        return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])


# PUBLIC_INTERFACE
@lru_cache
def get_password_hasher() -> BcryptPasswordHasher:
    """Process-wide hasher configured from settings."""
    return BcryptPasswordHasher(rounds=get_settings().bcrypt_rounds)


# PUBLIC_INTERFACE
@lru_cache
def get_token_issuer() -> JwtTokenIssuer:
    """Process-wide token issuer configured from settings."""
    settings = get_settings()
    return JwtTokenIssuer(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )
