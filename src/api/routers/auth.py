from fastapi import APIRouter, Depends

from src.api.deps import get_auth_service
from src.api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from src.api.services.auth import AuthResult, AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _to_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(token=result.token, username=result.username, role=result.role)


@router.post(
    "/register",
    response_model=AuthResponse,
    summary="Register a new user",
    description="Create a new account (USER or DRIVER) and return an access token.",
    operation_id="auth_register",
)
def register(payload: RegisterRequest, service: AuthService = Depends(get_auth_service)) -> AuthResponse:
    """
    Register a new user and return a JWT access token.

    Errors:
    - 400 if the username already exists
    - 400 if role is not USER or DRIVER
    """
    return _to_response(service.register(payload.username, payload.password, payload.role))


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Authenticate by username/password and return a new access token.",
    operation_id="auth_login",
)
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)) -> AuthResponse:
    """
    Login by verifying user credentials and return a JWT access token.

    Errors:
    - 400 "Invalid credentials" for an unknown username or a wrong password
    """
    return _to_response(service.login(payload.username, payload.password))
