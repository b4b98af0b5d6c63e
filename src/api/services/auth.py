"""
Credential issuance: registration and login.

Both operations end by minting a fresh signed token for the account; tokens
are never cached or reused.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from src.api.errors import BadRequestError
from src.api.models.user import User, UserRole
from src.api.repositories.users import UserRepository
from src.api.security import PasswordHasher, TokenIssuer

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
USERNAME_TAKEN = "Username already exists"


@dataclass(frozen=True)
class AuthResult:
    token: str
    username: str
    role: UserRole


def parse_role(value: str) -> UserRole:
    """
    Map a requested role string onto UserRole.

    Only the exact values "USER" and "DRIVER" are accepted.

    Raises:
        BadRequestError: for any other value.
    """
    try:
        return UserRole(value)
    except ValueError:
        raise BadRequestError("Role must be USER or DRIVER")


class AuthService:
    """Registers accounts and authenticates them against stored password hashes."""

    def __init__(self, users: UserRepository, hasher: PasswordHasher, tokens: TokenIssuer):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    def register(self, username: str, password: str, requested_role: str) -> AuthResult:
        """
        Create an account and return an access token for it.

        Errors:
        - BadRequestError if the username already exists
        - BadRequestError if the role is not USER or DRIVER
        """
        if self.users.exists_by_username(username):
            raise BadRequestError(USERNAME_TAKEN)

        role = parse_role(requested_role)

        user = User(
            username=username,
            password_hash=self.hasher.hash(password),
            role=role,
        )
        try:
            self.users.save(user)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name.
            raise BadRequestError(USERNAME_TAKEN)

        logger.info("User registered", extra={"username": username, "role": role.value})
        return AuthResult(token=self.tokens.issue(username, role), username=username, role=role)

    def login(self, username: str, password: str) -> AuthResult:
        """
        Verify credentials and return a freshly issued token.

        Errors:
        - BadRequestError("Invalid credentials") for an unknown username or a
          wrong password; the two cases are indistinguishable to the caller.
        """
        user = self.users.find_by_username(username)
        if user is None:
            # Unknown usernames pay the bcrypt cost too, so timing does not reveal them.
            self.hasher.dummy_verify()
        if user is None or not self.hasher.verify(password, user.password_hash):
            logger.info("Login rejected", extra={"username": username})
            raise BadRequestError(INVALID_CREDENTIALS)

        logger.info("User logged in", extra={"username": username})
        return AuthResult(
            token=self.tokens.issue(user.username, user.role),
            username=user.username,
            role=user.role,
        )
