import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.api.models.base import Base


class UserRole(str, enum.Enum):
    """User roles supported by the application."""
    USER = "USER"
    DRIVER = "DRIVER"


class User(Base):
    """
    ORM model for the 'users' table.

    username is unique and never changes after registration; role is fixed at
    registration as well.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole, name="user_role"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
