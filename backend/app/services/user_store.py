"""
Persistence layer for user records.

`UserStore` is the surface the user service depends on; `SqlAlchemyUserStore`
implements it over a request-scoped SQLAlchemy session. Rows are mapped to
`UserRecord` field by field so the ORM never leaks past this module.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, PersistenceError
from app.core.logging import get_logger
from app.models.event import Event
from app.models.user import User, utcnow
from app.services.user_record import EventRecord, UserRecord


logger = get_logger(__name__)

# Largest value a 64-bit INTEGER primary key can hold
MAX_ID = 2**63 - 1


class UserStore(Protocol):
    def find_all(self) -> List[UserRecord]: ...

    def find_by_id(self, user_id: int) -> Optional[UserRecord]: ...

    def find_by_email(self, email: str) -> Optional[UserRecord]: ...

    def create(self, record: UserRecord) -> UserRecord: ...

    def save(self, record: UserRecord) -> UserRecord: ...

    def delete_by_id(self, user_id: int) -> None: ...

    def find_events(self, owner_id: int) -> List[EventRecord]: ...


def _to_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        name=row.name,
        phone_number=row.phone_number,
        email=row.email,
        password=row.password,
        verified=bool(row.verified),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_event_record(row: Event) -> EventRecord:
    return EventRecord(
        id=row.id,
        title=row.title,
        owner_id=row.owner_id,
        description=row.description,
        location=row.location,
        starts_at=row.starts_at,
        created_at=row.created_at,
    )


def _apply(row: User, record: UserRecord) -> None:
    row.name = record.name
    row.phone_number = record.phone_number
    row.email = record.email
    row.password = record.password
    row.verified = record.verified


class SqlAlchemyUserStore:
    """
    UserStore backed by a SQLAlchemy session. Every SQLAlchemyError is rolled
    back and re-raised as PersistenceError.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------ #
    # Reads
    def find_all(self) -> List[UserRecord]:
        try:
            rows = self._session.scalars(select(User).order_by(User.id)).all()
        except SQLAlchemyError as e:
            raise self._fail("list users", e) from e
        return [_to_record(row) for row in rows]

    def find_by_id(self, user_id: int) -> Optional[UserRecord]:
        if not 0 < user_id <= MAX_ID:
            return None
        try:
            row = self._session.get(User, user_id)
        except SQLAlchemyError as e:
            raise self._fail(f"fetch user {user_id}", e) from e
        return _to_record(row) if row is not None else None

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        try:
            row = self._session.scalars(select(User).where(User.email == email).limit(1)).first()
        except SQLAlchemyError as e:
            raise self._fail("fetch user by email", e) from e
        return _to_record(row) if row is not None else None

    def find_events(self, owner_id: int) -> List[EventRecord]:
        if not 0 < owner_id <= MAX_ID:
            return []
        statement = select(Event).where(Event.owner_id == owner_id).order_by(Event.id)
        try:
            rows = self._session.scalars(statement).all()
        except SQLAlchemyError as e:
            raise self._fail(f"list events for user {owner_id}", e) from e
        return [_to_event_record(row) for row in rows]

    # ------------------------------------------------------------------ #
    # Writes
    def create(self, record: UserRecord) -> UserRecord:
        row = User()
        _apply(row, record)
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("create user", e) from e
        return _to_record(row)

    def save(self, record: UserRecord) -> UserRecord:
        try:
            row = self._session.get(User, record.id)
            if row is None:
                # removed after the caller's existence check; do not resurrect it
                raise NotFoundError(record.id)
            _apply(row, record)
            row.updated_at = utcnow()
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail(f"update user {record.id}", e) from e
        return _to_record(row)

    def delete_by_id(self, user_id: int) -> None:
        try:
            row = self._session.get(User, user_id)
            if row is None:
                raise NotFoundError(user_id)
            self._session.delete(row)
            self._session.commit()
        except SQLAlchemyError as e:
            raise self._fail(f"delete user {user_id}", e) from e

    # ------------------------------------------------------------------ #
    def _fail(self, action: str, error: SQLAlchemyError) -> PersistenceError:
        self._session.rollback()
        conflict = isinstance(error, IntegrityError)
        # DBAPI message only; the wrapped statement parameters carry the password hash
        logger.error("Failed to %s: %s", action, getattr(error, "orig", None) or type(error).__name__)
        message = "user with this email or phone number already exists" if conflict else f"failed to {action}"
        return PersistenceError(message, conflict=conflict, cause=error)
