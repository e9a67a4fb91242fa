"""
Shared fixtures: a fresh in-memory SQLite database per test, a user service
bound to it, and a FastAPI TestClient whose `get_db` uses the same database.
"""

import os

# Must be set before app.core.config builds its settings singleton.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from app.core.database import Base, build_engine, get_db  # noqa: E402
from app.models import event, user  # noqa: E402,F401
from app.services.user_record import UserRecord  # noqa: E402
from app.services.user_store import SqlAlchemyUserStore  # noqa: E402
from app.services.users import UserService  # noqa: E402


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session) -> SqlAlchemyUserStore:
    return SqlAlchemyUserStore(session)


@pytest.fixture
def service(store) -> UserService:
    return UserService(store)


@pytest.fixture
def ada() -> UserRecord:
    return UserRecord(
        name="Ada",
        phone_number="+1-555-0100",
        email="ada@example.com",
        password="longenough1",
    )


@pytest.fixture
def grace() -> UserRecord:
    return UserRecord(
        name="Grace",
        phone_number="+1-555-0199",
        email="grace@example.com",
        password="cobol-forever",
    )


@pytest.fixture
def client(engine) -> Iterator[TestClient]:
    from app.main import app

    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
