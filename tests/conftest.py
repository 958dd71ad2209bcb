import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db import models  # noqa: F401
from app.db.base import Base
from app.db.enums import Role
from app.db.repositories import stores as stores_repo
from app.main import app
from app.services import auth as auth_service
from app.services.security import pwd_context

DEFAULT_PASSWORD = "Secret@123"

# minimum bcrypt cost keeps the suite fast
pwd_context.update(bcrypt__rounds=4)


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
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(role=Role.USER, email=None, name=None, address="221B Baker Street, London", password=DEFAULT_PASSWORD):
        counter["n"] += 1
        return auth_service.create_account(
            db_session,
            name=name or f"Test Account Holder Number {counter['n']:03d}",
            email=email or f"{role}{counter['n']}@shopmail.com",
            password=password,
            address=address,
            role=role,
        )

    return _make_user


@pytest.fixture
def make_store(db_session):
    counter = {"n": 0}

    def _make_store(name=None, email=None, address="1 Market Square", owner=None):
        counter["n"] += 1
        return stores_repo.create_store(
            db_session,
            name=name or f"Store {counter['n']:03d}",
            email=email or f"store{counter['n']}@shopmail.com",
            address=address,
            owner_id=owner.id if owner is not None else None,
        )

    return _make_store


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {auth_service.issue_token(user)}"}

    return _auth_headers


@pytest.fixture
def admin(make_user):
    return make_user(role=Role.ADMIN, email="admin@shopmail.com")
