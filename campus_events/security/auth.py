import logging
from dataclasses import dataclass
from datetime import timedelta, datetime, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from campus_events.config.settings import settings
from campus_events.core.errors import AuthenticationError, AuthorizationError, ConfigurationError
from campus_events.crud.user import get_user
from campus_events.db.models.Role import Role
from campus_events.db.session import get_db

logger = logging.getLogger(__name__)

# missing credentials are answered by the dependencies below
bearer_scheme = HTTPBearer(auto_error=False)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


@dataclass(frozen=True)
class AuthContext:
    id: str
    email: str
    role: Role


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def get_signing_secret() -> str:
    if not settings.JWT_SECRET:
        raise ConfigurationError("JWT_SECRET not configured")
    return settings.JWT_SECRET

def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    secret = get_signing_secret()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": user_id, "userId": user_id, "exp": expire}
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> str:
    """Return the user id carried by a token, or raise AuthenticationError."""
    secret = get_signing_secret()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info(f"Rejected token: {e}")
        raise AuthenticationError("Invalid or expired token")
    user_id = payload.get("userId") or payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid or expired token")
    return user_id

def resolve_user(db: Session, token: str) -> AuthContext:
    user_id = decode_access_token(token)
    user = get_user(db, user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("Invalid or inactive user")
    return AuthContext(id=user.id, email=user.email, role=user.role)

def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        db: Session = Depends(get_db)
) -> AuthContext:
    if credentials is None:
        raise AuthenticationError("Access token required", status_code=401)
    return resolve_user(db, credentials.credentials)

def get_optional_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        db: Session = Depends(get_db)
) -> Optional[AuthContext]:
    if credentials is None:
        return None
    try:
        return resolve_user(db, credentials.credentials)
    except (AuthenticationError, ConfigurationError) as e:
        logger.debug(f"Continuing without user: {e.message}")
        return None

def require_role(*roles: Role):
    allowed = set(roles)

    def _check_role(current_user: AuthContext = Depends(get_current_user)) -> AuthContext:
        if current_user.role not in allowed:
            raise AuthorizationError("Insufficient permissions")
        return current_user

    return _check_role
