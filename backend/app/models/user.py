"""
user.py — ORM Model for Registered Users

Purpose:
- Represent registered users of the events system.
- Stores hashed passwords only — never raw.
- Email and phone number are unique across all rows.

Used by:
- app.services.user_store (explicit row <-> UserRecord mapping)
"""

import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.core.database import Base


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Display
    name = Column(String(255), nullable=False)

    # Contact / login identifiers
    phone_number = Column(String, unique=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)

    # bcrypt hash (60 chars); never plaintext
    password = Column(String(100), nullable=False)

    verified = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Events owned by this user; removed together with the user
    events = relationship(
        "Event",
        back_populates="owner",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
