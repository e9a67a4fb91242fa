"""
User record model: shape, sanitization, per-action validation and hashing.

Ordering rule for every write:
    sanitize -> validate -> hash_for_write -> store
A record is hashed exactly once per write; hashing a stored hash again would
make it unverifiable against the original plaintext.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from app.core.errors import ValidationError
from app.core.security import MAX_PASSWORD_BYTES, hash_password


MIN_PASSWORD_LENGTH = 8


@dataclass
class UserRecord:
    id: int = 0
    name: str = ""
    phone_number: str = ""
    email: str = ""
    password: str = ""
    verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __repr__(self) -> str:
        # keep password material out of logs and tracebacks
        return f"UserRecord(id={self.id!r}, name={self.name!r}, email={self.email!r}, verified={self.verified!r})"


@dataclass
class UserPatch:
    """Partial update; None means "keep the stored value"."""
    name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    verified: Optional[bool] = None

    def merge_into(self, stored: UserRecord) -> UserRecord:
        changes = {
            key: value
            for key, value in (
                ("name", self.name),
                ("phone_number", self.phone_number),
                ("email", self.email),
                ("password", self.password),
                ("verified", self.verified),
            )
            if value is not None
        }
        return replace(stored, **changes)


@dataclass
class EventRecord:
    id: int
    title: str
    owner_id: int
    description: Optional[str] = None
    location: Optional[str] = None
    starts_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class UserAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    LOGIN = "login"

    @classmethod
    def parse(cls, value: str) -> "UserAction":
        """Map "update"/"login" (any case) to their action; anything else is CREATE."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.CREATE


# --------------------------------------------------------------------------- #
# Sanitize

def _clean_text(value: str) -> str:
    """
    Trim and markup-escape a display field.

    The value is unescaped first so an already-escaped value is not escaped
    twice. Entity text and the character it names therefore collapse to the
    same stored value: `a&amp;b@x.com` and `a&b@x.com` are both stored as
    `a&amp;b@x.com` and count as the same email for uniqueness.
    """
    return html.escape(html.unescape(value.strip()))


def sanitize(record: UserRecord) -> UserRecord:
    return replace(
        record,
        id=0,
        name=_clean_text(record.name),
        email=_clean_text(record.email),
        phone_number=_clean_text(record.phone_number),
    )


# --------------------------------------------------------------------------- #
# Validate

def _require(value: str, field_name: str, reason: str) -> None:
    if not value:
        raise ValidationError(field_name, reason)


def _check_password_bytes(password: str) -> None:
    if "\x00" in password:
        raise ValidationError("password", "password must not contain NUL characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            "password", f"password must be at most {MAX_PASSWORD_BYTES} bytes"
        )


def _check_email_format(email: str) -> None:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("email", "email is invalid") from exc


def _validate_create(record: UserRecord) -> None:
    _require(record.name, "name", "name is required")
    _require(record.phone_number, "phoneNumber", "phone number is required")
    _require(record.password, "password", "password is required")
    _check_password_bytes(record.password)
    if len(record.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "password", f"password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    _require(record.email, "email", "email is required")
    _check_email_format(record.email)


def _validate_update(record: UserRecord) -> None:
    _require(record.name, "name", "name is required")
    _require(record.phone_number, "phoneNumber", "phone number is required")
    _require(record.password, "password", "password is required")
    _check_password_bytes(record.password)
    _require(record.email, "email", "email is required")
    _check_email_format(record.email)


def _validate_login(record: UserRecord) -> None:
    _require(record.password, "password", "password is required")
    _check_password_bytes(record.password)
    _require(record.email, "email", "email is required")
    _check_email_format(record.email)


_VALIDATORS: Dict[UserAction, Callable[[UserRecord], None]] = {
    UserAction.CREATE: _validate_create,
    UserAction.UPDATE: _validate_update,
    UserAction.LOGIN: _validate_login,
}


def validate(record: UserRecord, action: UserAction = UserAction.CREATE) -> None:
    """
    Raise the first ValidationError for `action`, checking fields in a fixed order.
    """
    _VALIDATORS[action](record)


# --------------------------------------------------------------------------- #
# Hash

def hash_for_write(record: UserRecord) -> UserRecord:
    """Return a copy whose password is the salted hash of the plaintext it carries."""
    return replace(record, password=hash_password(record.password))
