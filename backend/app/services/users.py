"""
users.py — User Service (CRUD orchestration, existence checks, login)

Purpose:
- Run the write pipeline for user records: sanitize -> validate -> hash -> store.
- Guard update/delete with an existence check.
- Verify presented credentials against the stored hash (no tokens issued).
- Look up the events owned by a user.

Key Interactions:
- app.services.user_record → record shape, sanitize/validate/hash steps.
- app.services.user_store → injected store; the only shared mutable resource.

Concurrency:
- The existence check and the following write are NOT atomic. If the row is
  deleted in between, the store raises NotFoundError instead of recreating it.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List

from app.core.errors import InvalidCredentialsError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.security import verify_password
from app.services.user_record import (
    EventRecord,
    UserAction,
    UserPatch,
    UserRecord,
    hash_for_write,
    sanitize,
    validate,
)
from app.services.user_store import UserStore


logger = get_logger(__name__)

INVALID_CREDENTIALS = "invalid email or password"


class UserService:
    def __init__(self, store: UserStore) -> None:
        self._store = store

    # ------------------------------------------------------------------ #
    # Reads
    def list_users(self) -> List[UserRecord]:
        return self._store.find_all()

    def exists_by_id(self, user_id: int) -> bool:
        record = self._store.find_by_id(user_id)
        return record is not None and record.id != 0

    def get_user(self, user_id: int) -> UserRecord:
        if not self.exists_by_id(user_id):
            logger.debug("User %s not found", user_id)
            raise NotFoundError(user_id)
        return self._fetch(user_id)

    def list_events_for_user(self, user_id: int) -> List[EventRecord]:
        return self._store.find_events(owner_id=user_id)

    # ------------------------------------------------------------------ #
    # Writes
    def create_user(self, raw: UserRecord) -> UserRecord:
        record = sanitize(raw)
        validate(record, UserAction.CREATE)
        record = hash_for_write(record)
        created = self._store.create(record)
        logger.info("Created user %s", created.id)
        return created

    def sign_up(self, raw: UserRecord, password_confirm: str) -> UserRecord:
        if raw.password != password_confirm:
            raise ValidationError("passwordConfirm", "passwords do not match")
        return self.create_user(raw)

    def update_user(self, user_id: int, patch: UserPatch) -> UserRecord:
        if not self.exists_by_id(user_id):
            logger.debug("Update skipped, user %s not found", user_id)
            raise NotFoundError(user_id)

        stored = self._fetch(user_id)
        record = replace(sanitize(patch.merge_into(stored)), id=stored.id)
        validate(record, UserAction.UPDATE)
        # the stored value is already a hash; only a newly supplied password is hashed
        if patch.password is not None:
            record = hash_for_write(record)

        updated = self._store.save(record)
        logger.info("Updated user %s", updated.id)
        return updated

    def delete_user(self, user_id: int) -> UserRecord:
        if not self.exists_by_id(user_id):
            logger.debug("Delete skipped, user %s not found", user_id)
            raise NotFoundError(user_id)

        last_known = self._fetch(user_id)
        self._store.delete_by_id(user_id)
        logger.info("Deleted user %s", user_id)
        return last_known

    # ------------------------------------------------------------------ #
    # Credentials
    def authenticate(self, email: str, password: str) -> UserRecord:
        """
        Confirm `password` matches the stored hash for `email`.
        Unknown email and wrong password fail with the same error.
        """
        credentials = sanitize(UserRecord(email=email, password=password))
        validate(credentials, UserAction.LOGIN)

        stored = self._store.find_by_email(credentials.email)
        if stored is None or not verify_password(password, stored.password):
            logger.info("Failed login attempt")
            raise InvalidCredentialsError(INVALID_CREDENTIALS)
        return stored

    # ------------------------------------------------------------------ #
    def _fetch(self, user_id: int) -> UserRecord:
        record = self._store.find_by_id(user_id)
        if record is None:
            # deleted between the existence check and this read
            raise NotFoundError(user_id)
        return record
