from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.api.config import get_settings
from src.api.models.base import Base

DATABASE_URL = get_settings().database_url

# Engine configured for typical web usage.
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


# PUBLIC_INTERFACE
def init_db() -> None:
    """Create any missing tables for the registered ORM models."""
    # Importing the model modules registers their tables on Base.metadata.
    from src.api.models import ride, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


# PUBLIC_INTERFACE
def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a SQLAlchemy session and ensures closure."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

