import os

# Settings and the engine are built at import time; pin a throwaway config first.
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SWEEPS_ENABLED"] = "false"
os.environ["ENABLE_RATE_LIMITING"] = "false"

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hoaxify.core.base import Base
from hoaxify.core import config as app_config
from hoaxify.core.security import hash_password

# Import models so they register with SQLAlchemy metadata.
from hoaxify.models.user import User
from hoaxify.models.token import Token  # noqa: F401
from hoaxify.models.hoax import Hoax  # noqa: F401
from hoaxify.models.file_attachment import FileAttachment  # noqa: F401

from hoaxify.core.database import get_db
from hoaxify.services import files as file_service
from hoaxify.services.tokens import create_token

DEFAULT_PASSWORD = "P4ssword"


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # StaticPool keeps one in-memory DB for the whole run; reset schema per test.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """
    Points every stored file at a per-test directory.
    """
    root = tmp_path / "uploads"
    monkeypatch.setattr(app_config.settings, "UPLOAD_DIR", str(root))
    file_service.create_folders()
    return root


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """
    Stub outbound email so tests never need SMTP; captures what would have been sent.
    """
    from hoaxify.services import email as email_service

    outbox: list[dict] = []

    def _activation(email, token):
        outbox.append({"kind": "activation", "to": email, "token": token})

    def _reset(email, token):
        outbox.append({"kind": "password_reset", "to": email, "token": token})

    monkeypatch.setattr(email_service, "send_account_activation", _activation)
    monkeypatch.setattr(email_service, "send_password_reset", _reset)
    return outbox


@pytest.fixture()
def app(db_session):
    import hoaxify.main as main

    fastapi_app = main.app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    """
    Anonymous client; pass ``headers=auth_headers(user)`` to act as a user.
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user(db_session):
    """
    Factory for persisted users. Users are active unless ``inactive=True``.
    """

    def _make_user(
        username: str = "user1",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        inactive: bool = False,
        **extra,
    ) -> User:
        user = User(
            username=username,
            email=email or f"{username}@mail.com",
            password=hash_password(password),
            inactive=inactive,
            **extra,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def users(make_user):
    """
    Two distinct active users for ownership / isolation tests.
    """
    return make_user("user1"), make_user("user2")


@pytest.fixture()
def auth_headers(db_session):
    """
    Issues a real bearer token for a user and returns request headers.
    """

    def _auth_headers(user: User) -> dict[str, str]:
        token = create_token(db_session, user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture()
def client_for(app, auth_headers):
    """
    Context manager to create a client authenticated as an arbitrary user.

    Usage:
        with client_for(user) as c:
            ...
    """

    @contextmanager
    def _client_for(user: User):
        with TestClient(app, headers=auth_headers(user)) as c:
            yield c

    return _client_for
