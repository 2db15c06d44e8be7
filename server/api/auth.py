# server/api/auth.py

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import COOKIE_NAME, COOKIE_SECURE, ACCESS_TOKEN_EXPIRE_MINUTES
from core.exceptions import AuthenticationError, ClientInputError, DependencyError
from core.logging import get_logger
from core.security import (
    MAX_PASSWORD_BYTES,
    create_access_token,
    decode_access_token,
    get_password_hash,
    pwd_context,
    verify_password,
)
from database import get_db
from models.user import User as UserModel


logger = get_logger(__name__)

router = APIRouter(prefix="/api")

INVALID_CREDENTIALS = "Invalid credentials."
USERNAME_TAKEN = "Username already exists."


class Credentials(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        # bcrypt ignores everything past 72 bytes
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class Message(BaseModel):
    message: str


class User(BaseModel):
    id: int
    username: str


# -------------------------------
# Session gate
# -------------------------------

def get_current_user_id(request: Request) -> int:
    """
    Rejects the request unless its session cookie carries a valid token.
    Used as a per-route dependency in front of every protected handler.
    """
    try:
        return decode_access_token(request.cookies.get(COOKIE_NAME))
    except AuthenticationError:
        logger.warning("Rejected request to %s: invalid or missing session", request.url.path)
        raise


def authenticate_user(db: Session, username: str, password: str):
    try:
        user = db.query(UserModel).filter(UserModel.username == username).first()
    except SQLAlchemyError:
        logger.error("User lookup failed", exc_info=True)
        raise DependencyError()
    if not user:
        # unknown users cost one bcrypt verify, like a wrong password
        pwd_context.dummy_verify()
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# -------------------------------
# Endpoints
# -------------------------------

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=Message)
@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=Message, include_in_schema=False)
def register(credentials: Credentials, db: Session = Depends(get_db)):
    try:
        user_exists = db.query(UserModel).filter(UserModel.username == credentials.username).first()
        if user_exists:
            raise ClientInputError(USERNAME_TAKEN)

        new_user = UserModel(
            username=credentials.username,
            hashed_password=get_password_hash(credentials.password),
        )
        db.add(new_user)
        db.commit()
    except IntegrityError:
        # lost a concurrent sign-up for the same username
        db.rollback()
        raise ClientInputError(USERNAME_TAKEN)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Sign-up failed for %s", credentials.username, exc_info=True)
        raise DependencyError()

    logger.info("Registered user %s", credentials.username)
    return {"message": "User registered successfully."}


@router.post("/login", response_model=Message)
def login(credentials: Credentials, response: Response, db: Session = Depends(get_db)):
    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        raise AuthenticationError(INVALID_CREDENTIALS, status_code=status.HTTP_400_BAD_REQUEST)

    response.set_cookie(
        key=COOKIE_NAME,
        value=create_access_token(user.id),
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
    )
    logger.info("User %s logged in", user.username)
    return {"message": "Login successful."}


@router.post("/logout", response_model=Message)
def logout(response: Response):
    response.delete_cookie(
        key=COOKIE_NAME,
        path="/",
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
    )
    return {"message": "Logged out successfully."}


@router.get("/me", response_model=User)
def read_users_me(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    try:
        user = db.get(UserModel, user_id)
    except SQLAlchemyError:
        logger.error("User lookup failed", exc_info=True)
        raise DependencyError()
    if user is None:
        raise AuthenticationError("Not authenticated.")
    return {"id": user.id, "username": user.username}
