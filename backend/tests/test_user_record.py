"""
Unit tests for the user record model: sanitize, per-action validation, hashing.
"""

import pytest

from app.core.errors import ValidationError
from app.core.security import verify_password
from app.services.user_record import (
    UserAction,
    UserPatch,
    UserRecord,
    hash_for_write,
    sanitize,
    validate,
)


# Sanitize
def test_sanitize_trims_escapes_and_clears_id():
    raw = UserRecord(
        id=42,
        name="  <b>Ada</b>  ",
        phone_number=" +1-555-0100 ",
        email="\tada@example.com\n",
        password="  keep spaces  ",
    )
    clean = sanitize(raw)

    assert clean.id == 0
    assert clean.name == "&lt;b&gt;Ada&lt;/b&gt;"
    assert clean.phone_number == "+1-555-0100"
    assert clean.email == "ada@example.com"
    # password is not a display field
    assert clean.password == "  keep spaces  "
    # input left untouched
    assert raw.id == 42


def test_sanitize_is_idempotent():
    raw = UserRecord(name=" Tom & Jerry <script> ", phone_number="'555'", email=' "q"@example.com ')
    once = sanitize(raw)
    twice = sanitize(once)

    assert once.name == "Tom &amp; Jerry &lt;script&gt;"
    assert twice == once


# Validate
@pytest.mark.parametrize(
    "action, record, field",
    [
        (UserAction.CREATE, UserRecord(), "name"),
        (UserAction.CREATE, UserRecord(name="Ada", email="bad"), "phoneNumber"),
        (UserAction.CREATE, UserRecord(name="Ada", phone_number="1"), "password"),
        (UserAction.CREATE, UserRecord(name="Ada", phone_number="1", password="longenough1"), "email"),
        (UserAction.UPDATE, UserRecord(password="x", email="ada@example.com"), "name"),
        (UserAction.UPDATE, UserRecord(name="Ada", email="ada@example.com"), "phoneNumber"),
        (UserAction.UPDATE, UserRecord(name="Ada", phone_number="1"), "password"),
        (UserAction.LOGIN, UserRecord(name="", phone_number=""), "password"),
        (UserAction.LOGIN, UserRecord(password="secret"), "email"),
    ],
)
def test_validate_reports_first_missing_field(action, record, field):
    with pytest.raises(ValidationError) as excinfo:
        validate(record, action)
    assert excinfo.value.field == field
    assert "required" in excinfo.value.reason


@pytest.mark.parametrize("email", ["not-an-email", "ada@example", "@example.com", "ada@@example.com"])
@pytest.mark.parametrize("action", list(UserAction))
def test_validate_rejects_malformed_email(action, email):
    record = UserRecord(name="Ada", phone_number="1", password="longenough1", email=email)
    with pytest.raises(ValidationError) as excinfo:
        validate(record, action)
    assert excinfo.value.field == "email"
    assert excinfo.value.reason == "email is invalid"


def test_validate_create_enforces_password_length():
    record = UserRecord(name="Ada", phone_number="1", password="short", email="ada@example.com")
    with pytest.raises(ValidationError) as excinfo:
        validate(record, UserAction.CREATE)
    assert excinfo.value.field == "password"

    # update and login have no length rule
    validate(record, UserAction.UPDATE)
    validate(record, UserAction.LOGIN)


def test_validate_accepts_complete_record(ada):
    for action in UserAction:
        validate(ada, action)


def test_login_ignores_name_and_phone():
    validate(UserRecord(email="ada@example.com", password="pw"), UserAction.LOGIN)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("update", UserAction.UPDATE),
        ("UPDATE", UserAction.UPDATE),
        ("Login", UserAction.LOGIN),
        ("create", UserAction.CREATE),
        ("", UserAction.CREATE),
        ("anything", UserAction.CREATE),
    ],
)
def test_action_parse(value, expected):
    assert UserAction.parse(value) is expected


# Hash
def test_hash_for_write_replaces_plaintext(ada):
    hashed = hash_for_write(ada)

    assert hashed.password != ada.password
    assert verify_password(ada.password, hashed.password)
    assert hashed.name == ada.name


def test_hashing_twice_breaks_verification(ada):
    twice = hash_for_write(hash_for_write(ada))
    assert not verify_password(ada.password, twice.password)


# Patch
def test_patch_merges_only_supplied_fields():
    stored = UserRecord(id=3, name="Ada", phone_number="1", email="ada@example.com", password="$hash")
    merged = UserPatch(name="Ada L.", verified=True).merge_into(stored)

    assert merged.id == 3
    assert merged.name == "Ada L."
    assert merged.verified is True
    assert merged.password == "$hash"
    assert merged.email == "ada@example.com"


def test_repr_hides_password(ada):
    assert ada.password not in repr(ada)


# Password byte rules
@pytest.mark.parametrize("action", list(UserAction))
def test_validate_rejects_password_longer_than_bcrypt_reads(action):
    record = UserRecord(name="Ada", phone_number="1", email="ada@example.com", password="a" * 72 + "SECRET-ONE")
    with pytest.raises(ValidationError) as excinfo:
        validate(record, action)
    assert excinfo.value.field == "password"


def test_validate_counts_password_bytes_not_characters():
    # 36 two-byte characters fill the 72-byte limit exactly; one more overflows it
    fits = UserRecord(name="Ada", phone_number="1", email="ada@example.com", password="é" * 36)
    validate(fits, UserAction.CREATE)

    with pytest.raises(ValidationError):
        validate(UserRecord(name="Ada", phone_number="1", email="ada@example.com", password="é" * 37))


@pytest.mark.parametrize("action", list(UserAction))
def test_validate_rejects_nul_in_password(action):
    record = UserRecord(name="Ada", phone_number="1", email="ada@example.com", password="longenough\x00x")
    with pytest.raises(ValidationError) as excinfo:
        validate(record, action)
    assert excinfo.value.field == "password"


def test_sanitize_folds_entity_text_into_same_email():
    escaped = sanitize(UserRecord(email="a&amp;b@x.com"))
    raw = sanitize(UserRecord(email="a&b@x.com"))
    assert escaped.email == raw.email == "a&amp;b@x.com"
