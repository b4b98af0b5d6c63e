"""Credential store: User persistence keyed by username."""

from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.models.user import User


class UserRepository(Protocol):
    def exists_by_username(self, username: str) -> bool: ...

    def find_by_username(self, username: str) -> Optional[User]: ...

    def save(self, user: User) -> User: ...


class SqlUserRepository:
    """UserRepository over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def exists_by_username(self, username: str) -> bool:
        return bool(self.db.scalar(select(exists().where(User.username == username))))

    def find_by_username(self, username: str) -> Optional[User]:
        return self.db.scalar(select(User).where(User.username == username))

    def save(self, user: User) -> User:
        """
        Insert or update a user and return the refreshed row.

        Raises:
            IntegrityError: if the username is already taken (the session is rolled back).
        """
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user
