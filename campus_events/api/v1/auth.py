import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_events.core.errors import AuthenticationError, ConflictError, NotFoundError
from campus_events.crud.user import create_user, find_registration_conflict, get_user, get_user_by_email, get_user_counts
from campus_events.db.session import get_db
from campus_events.schemas.user import (
    AuthResponse,
    ProfileResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserPublic,
)
from campus_events.security.auth import (
    AuthContext,
    create_access_token,
    get_current_user,
    get_password_hash,
    get_signing_secret,
    verify_password,
)
from campus_events.utils.user_utils import format_user_data

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    get_signing_secret()

    conflict = find_registration_conflict(db, user_in.email, user_in.username)
    if conflict:
        raise ConflictError(conflict)

    new_user = create_user(
        db,
        email=user_in.email,
        username=user_in.username,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        password_hash=get_password_hash(user_in.password)
    )
    logger.info(f"Registered user {new_user.id}")

    return AuthResponse(
        message="User registered successfully",
        user=UserPublic.model_validate(new_user),
        token=create_access_token(new_user.id)
    )


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = get_user_by_email(db, credentials.email)
    if not user or not user.is_active or not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("Invalid credentials", status_code=status.HTTP_401_UNAUTHORIZED)

    return AuthResponse(
        message="Login successful",
        user=UserPublic.model_validate(user),
        token=create_access_token(user.id)
    )


@router.get("/me", response_model=ProfileResponse)
def get_me(db: Session = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    user = get_user(db, current_user.id)
    if not user:
        raise NotFoundError("User not found")

    counts = get_user_counts(db, [user.id])[user.id]
    return ProfileResponse(user=format_user_data(user, counts))


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(current_user: AuthContext = Depends(get_current_user)):
    return TokenResponse(
        message="Token refreshed successfully",
        token=create_access_token(current_user.id)
    )
