"""
users.py — User CRUD Endpoints (API Layer)

Purpose:
- Expose list / fetch / create / update / delete for users, plus the
  user → events association lookup.
    • GET    /users
    • GET    /users/{user_id}
    • POST   /users
    • PUT    /users/{user_id}
    • DELETE /users/{user_id}
    • GET    /users/{user_id}/events

Key Interactions:
- app.services.users.UserService → all business logic.
- app.services.user_store.SqlAlchemyUserStore → store bound to the request session.
- app.core.database → DB session.

This file should be thin: request schema → service call → response schema.
Domain errors are translated to HTTP responses by the handlers in app.main.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.user_record import EventRecord, UserPatch, UserRecord
from app.services.user_store import SqlAlchemyUserStore
from app.services.users import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"]
)

# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------

def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """One service per request, bound to the request's session."""
    return UserService(SqlAlchemyUserStore(db))

# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------

class UserIn(BaseModel):
    """
    Request body for POST /users.
    Fields default to empty so missing values reach the service validator,
    which reports the first missing field. A client-supplied `id` is ignored.
    """
    id: int = 0
    name: str = ""
    phoneNumber: str = ""
    email: str = ""
    password: str = ""
    verified: bool = False

    def to_record(self) -> UserRecord:
        return UserRecord(
            id=self.id,
            name=self.name,
            phone_number=self.phoneNumber,
            email=self.email,
            password=self.password,
            verified=self.verified,
        )


class UserUpdateIn(BaseModel):
    """Request body for PUT /users/{user_id}; omitted fields keep their stored value."""
    name: Optional[str] = None
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    verified: Optional[bool] = None

    def to_patch(self) -> UserPatch:
        return UserPatch(
            name=self.name,
            phone_number=self.phoneNumber,
            email=self.email,
            password=self.password,
            verified=self.verified,
        )


class UserOut(BaseModel):
    """
    Response schema for a user. The password hash is never returned.
    """
    id: int
    name: str
    phoneNumber: str
    email: str
    verified: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserOut":
        return cls(
            id=record.id,
            name=record.name,
            phoneNumber=record.phone_number,
            email=record.email,
            verified=record.verified,
            createdAt=record.created_at,
            updatedAt=record.updated_at,
        )


class EventOut(BaseModel):
    id: int
    title: str
    ownerId: int
    description: Optional[str] = None
    location: Optional[str] = None
    startsAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: EventRecord) -> "EventOut":
        return cls(
            id=record.id,
            title=record.title,
            ownerId=record.owner_id,
            description=record.description,
            location=record.location,
            startsAt=record.starts_at,
            createdAt=record.created_at,
        )

# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=List[UserOut])
def list_users(service: UserService = Depends(get_user_service)):
    """
    GET /users — every stored user in id order, no pagination.
    """
    return [UserOut.from_record(record) for record in service.list_users()]


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    """
    GET /users/{user_id} — 404 "user not found!" when absent.
    """
    return UserOut.from_record(service.get_user(user_id))


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserIn, service: UserService = Depends(get_user_service)):
    """
    POST /users

    Flow:
    1. Sanitize name / email / phone number, drop any client id.
    2. Validate required fields and email format.
    3. Hash the password.
    4. Insert the row (409 on duplicate email or phone number).
    """
    return UserOut.from_record(service.create_user(payload.to_record()))


@router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: int, payload: UserUpdateIn, service: UserService = Depends(get_user_service)):
    """
    PUT /users/{user_id} — merge the body over the stored user and save it.
    """
    return UserOut.from_record(service.update_user(user_id, payload.to_patch()))


@router.delete("/{user_id}", response_model=UserOut)
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    """
    DELETE /users/{user_id} — hard delete; returns the user's last-known values.
    """
    return UserOut.from_record(service.delete_user(user_id))


@router.get("/{user_id}/events", response_model=List[EventOut])
def list_user_events(user_id: int, service: UserService = Depends(get_user_service)):
    """
    GET /users/{user_id}/events — events whose owner is `user_id`.
    """
    return [EventOut.from_record(record) for record in service.list_events_for_user(user_id)]
