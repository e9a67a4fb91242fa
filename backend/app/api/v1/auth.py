"""
auth.py — Sign-up and Credential Verification Endpoints (API Layer)

Purpose:
- POST /auth/signup: create a user after checking the password confirmation.
- POST /auth/login: confirm a presented password matches the stored hash.

No sessions or tokens are issued; a successful login only reports that the
credentials are valid. Hashing and lookups live in app.services.users.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.api.v1.users import UserOut, get_user_service
from app.services.user_record import UserRecord
from app.services.users import UserService

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

# -----------------------------------------------------------------------------
# Request / Response Schemas
# -----------------------------------------------------------------------------

class SignUpRequest(BaseModel):
    """
    Schema for sign-up POST.
    - `password`: at least 8 characters.
    - `passwordConfirm`: must equal `password`.
    """
    name: str = ""
    phoneNumber: str = ""
    email: str = ""
    password: str = ""
    passwordConfirm: str = ""


class LoginRequest(BaseModel):
    """
    Schema for login POST.
    - `email`: User's login email.
    - `password`: Raw password supplied by the user.
    """
    email: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    message: str
    user: UserOut


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(payload: SignUpRequest, service: UserService = Depends(get_user_service)):
    """
    POST /auth/signup — 422 on mismatched confirmation or invalid fields,
    409 when the email or phone number is taken.
    """
    record = UserRecord(
        name=payload.name,
        phone_number=payload.phoneNumber,
        email=payload.email,
        password=payload.password,
    )
    return UserOut.from_record(service.sign_up(record, payload.passwordConfirm))


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, service: UserService = Depends(get_user_service)):
    """
    POST /auth/login

    Flow:
    1. Validate email + password are present and the email is well formed.
    2. Look up the user by email.
    3. Verify the password against the stored hash.
    4. Invalid → 401 Unauthorized (same message for unknown email and wrong password).
    """
    user = service.authenticate(payload.email, payload.password)
    return LoginResponse(message="login successful", user=UserOut.from_record(user))
