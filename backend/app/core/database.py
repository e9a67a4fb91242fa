"""
database.py — Database Session & Connection Management

Purpose:
- Create and provide access to the relational database used by the backend.
- Manage SQLAlchemy Engine + Session lifecycle.
- Expose a FastAPI dependency `get_db()` that yields a session per-request.
- Own the shared declarative `Base` so every model lands in one metadata.

Key Characteristics:
- Synchronous SQLAlchemy engine.
- No Alembic migrations — `init_db()` creates missing tables at startup.
- Session is opened at the start of a request and closed after the response.

This module does NOT:
- Define ORM models (see app/models/*).
- Perform any queries or business logic.
"""

from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

# -----------------------------------------------------------------------------
# SQLAlchemy Engine
# -----------------------------------------------------------------------------

def build_engine(db_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for `db_url`.

    SQLite needs `check_same_thread=False` because FastAPI runs sync endpoints
    in a threadpool; in-memory SQLite also needs a single shared connection.
    """
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(db_url, echo=echo, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    else:
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(db_url, echo=echo, **kwargs)


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def init_db(bind: Engine = None) -> None:
    """
    Create all tables registered on `Base`.
    """
    # Register models on Base.metadata
    from app.models import event, user  # noqa: F401

    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ensured on %s", bind.url.render_as_string(hide_password=True))

# -----------------------------------------------------------------------------
# FastAPI Dependency
# -----------------------------------------------------------------------------

def get_db() -> Iterator[Session]:
    """
    FastAPI dependency: yields a database session for the duration of the request.

    Usage in API endpoint:
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
