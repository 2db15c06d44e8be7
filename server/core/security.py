# server/core/security.py

from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext

from core.config import JWT_SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from core.exceptions import AuthenticationError


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MAX_PASSWORD_BYTES = 72


# -------------------------------
# Password hashing
# -------------------------------

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# -------------------------------
# Session tokens
# -------------------------------

def _secret_key() -> str:
    if not JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY is not configured")
    return JWT_SECRET_KEY


def create_access_token(user_id: int, issued_at: datetime | None = None) -> str:
    """
    Signs a session token whose only claim besides the timestamps is the user id.
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": str(user_id), "iat": issued_at, "exp": expire}
    return jwt.encode(to_encode, _secret_key(), algorithm=ALGORITHM)


def decode_access_token(token: str | None) -> int:
    """
    Returns the user id carried by a valid token.
    Missing, malformed, expired or foreign-signed tokens all raise
    the same AuthenticationError.
    """
    credentials_exception = AuthenticationError("Not authenticated.")
    if not token:
        raise credentials_exception
    try:
        payload = jwt.decode(token, _secret_key(), algorithms=[ALGORITHM])
        return int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError):
        raise credentials_exception
