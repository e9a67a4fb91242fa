"""
security.py — Password Hashing Utilities

Purpose:
- Hash & verify passwords (never store raw passwords).
- Shared by the user service for sign-up, updates and login.

Key Constraints:
- No token issuance: login only confirms a presented password matches the stored hash.
- Hashes are salted bcrypt; the cost comes from settings.BCRYPT_ROUNDS.

This module does NOT:
- Define API routes → that lives in app/api/v1/auth.py
- Query the database.
"""

from passlib.context import CryptContext  # password hashing

from app.core.config import settings


# -----------------------------------------------------------------------------
# Password Hashing
# -----------------------------------------------------------------------------

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

def hash_password(raw_password: str) -> str:
    """
    Hash a plaintext password using bcrypt.
    """
    return pwd_context.hash(raw_password)

def verify_password(raw_password: str, hashed_password: str) -> bool:
    """
    Verify that a raw password matches its hashed stored version.

    Returns False for empty input, a password longer than bcrypt can hash,
    or a value that is not a recognised hash.
    """
    if not raw_password or not hashed_password:
        return False
    # bcrypt ignores bytes past 72; a longer password cannot be told apart
    if len(raw_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return pwd_context.verify(raw_password, hashed_password)
    except ValueError:
        return False
