"""
Shared FastAPI dependencies for authentication/authorization and service wiring.

This module centralizes JWT parsing and role checks so routers can enforce
consistent access controls, and builds the per-request service objects from
their collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.api.config import Settings, get_settings
from src.api.db import get_db
from src.api.models.user import UserRole
from src.api.repositories.rides import SqlRideRepository
from src.api.repositories.users import SqlUserRepository
from src.api.security import BcryptPasswordHasher, JwtTokenIssuer, get_password_hasher, get_token_issuer
from src.api.services.auth import AuthService
from src.api.services.rides import RideService

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller as recovered from the access token alone."""

    username: str
    role: UserRole


def _unauthorized(detail: str) -> HTTPException:
    """Create a standardized 401 exception with WWW-Authenticate header."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# PUBLIC_INTERFACE
def get_current_token_payload(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: JwtTokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """
    Return decoded JWT payload for the current request.

    Authentication: Bearer JWT access token.

    Raises:
        HTTPException(401): if token missing/invalid/expired.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Missing authentication token.")
    try:
        payload = tokens.decode(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token.")

    if not payload.get("sub"):
        raise _unauthorized("Invalid token.")
    return payload


# PUBLIC_INTERFACE
def get_current_principal(payload: Dict[str, Any] = Depends(get_current_token_payload)) -> Principal:
    """
    Return the caller's username and role from the token claims.

    The credential store is not consulted; services resolve the username
    themselves when they need the full user.

    Raises:
        HTTPException(401): if the role claim is not a known role.
    """
    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        raise _unauthorized("Invalid token.")
    return Principal(username=str(payload["sub"]), role=role)


# PUBLIC_INTERFACE
def require_role(*roles: UserRole) -> Callable[..., Principal]:
    """
    Build a dependency that admits only callers holding one of `roles`.

    Raises:
        HTTPException(403): if the caller's role is not allowed.
    """
    allowed = set(roles)

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            names = " or ".join(sorted(r.value for r in allowed))
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{names} role required.",
            )
        return principal

    return dependency


# PUBLIC_INTERFACE
def get_auth_service(
    db: Session = Depends(get_db),
    hasher: BcryptPasswordHasher = Depends(get_password_hasher),
    tokens: JwtTokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(users=SqlUserRepository(db), hasher=hasher, tokens=tokens)


# PUBLIC_INTERFACE
def get_ride_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RideService:
    return RideService(
        rides=SqlRideRepository(db),
        users=SqlUserRepository(db),
        completion_policy=settings.completion_policy,
    )
