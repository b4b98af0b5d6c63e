from pydantic import BaseModel, Field, field_validator

from src.api.models.user import UserRole

# bcrypt only reads the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100, description="Unique username")
    password: str = Field(..., min_length=1, description="Account password (at most 72 bytes UTF-8)")
    # Kept as a plain string so unknown roles are rejected by the auth service with a 400.
    role: str = Field(..., min_length=1, description="User role: USER or DRIVER")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100, description="Username")
    password: str = Field(..., min_length=1, description="Account password (at most 72 bytes UTF-8)")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class AuthResponse(BaseModel):
    token: str = Field(..., description="JWT access token")
    username: str = Field(..., description="Authenticated username")
    role: UserRole = Field(..., description="Role bound into the token")
