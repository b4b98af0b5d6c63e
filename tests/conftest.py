"""
Shared fixtures.

Required environment variables are set before any application module is
imported; every test gets a fresh in-memory SQLite database.
"""

import os

# Set before importing src.api modules: config is read at import time.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.api.config import CompletionPolicy
from src.api.models import ride as _ride_models  # noqa: F401
from src.api.models import user as _user_models  # noqa: F401
from src.api.models.base import Base
from src.api.repositories.rides import SqlRideRepository
from src.api.repositories.users import SqlUserRepository
from src.api.security import BcryptPasswordHasher, JwtTokenIssuer
from src.api.services.auth import AuthService
from src.api.services.rides import RideService

TEST_SECRET = "test-secret"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return JwtTokenIssuer(secret_key=TEST_SECRET)


@pytest.fixture
def user_repo(db_session):
    return SqlUserRepository(db_session)


@pytest.fixture
def ride_repo(db_session):
    return SqlRideRepository(db_session)


@pytest.fixture
def auth_service(user_repo, hasher, tokens):
    return AuthService(users=user_repo, hasher=hasher, tokens=tokens)


@pytest.fixture
def ride_service(ride_repo, user_repo):
    return RideService(rides=ride_repo, users=user_repo, completion_policy=CompletionPolicy.any)


@pytest.fixture
def alice(auth_service, user_repo):
    auth_service.register("alice", "alice-pw", "USER")
    return user_repo.find_by_username("alice")


@pytest.fixture
def bob(auth_service, user_repo):
    auth_service.register("bob", "bob-pw", "DRIVER")
    return user_repo.find_by_username("bob")


@pytest.fixture
def carol(auth_service, user_repo):
    auth_service.register("carol", "carol-pw", "DRIVER")
    return user_repo.find_by_username("carol")


@pytest.fixture
def app(session_factory):
    from src.api.db import get_db
    from src.api.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
