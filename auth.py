import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from passlib.context import CryptContext
from sqlalchemy.orm import Session

import database
import models
from config import settings
from database import get_db
from responses import ApiResponse, dispatch, preflight
from validation import is_valid_email

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

router = APIRouter()

SESSION_KEYS = ("user_id", "user_name", "user_email", "logged_in")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_user_by_email(db: Session, email: str):
    return db.query(database.User).filter(database.User.email == email).first()


def authenticate_user(db: Session, email: str, password: str):
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password):
        return None
    return user


def create_user(db: Session, name: str, email: str, password: str):
    user = database.User(name=name, email=email, password=get_password_hash(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(db: Session, payload: models.LoginRequest, session: dict) -> ApiResponse:
    if payload.email is None or payload.password is None:
        return ApiResponse.fail("Email and password are required")

    email = payload.email.strip()
    if not is_valid_email(email):
        return ApiResponse.fail("Invalid email format")
    if len(payload.password) < settings.min_password_length:
        return ApiResponse.fail(f"Password must be at least {settings.min_password_length} characters")

    user = authenticate_user(db, email, payload.password)
    if user is None:
        logger.info("Failed login for %s", email)
        return ApiResponse.fail("Invalid email or password", status_code=401)

    session["user_id"] = user.id
    session["user_name"] = user.name
    session["user_email"] = user.email
    session["logged_in"] = True
    return ApiResponse.succeed(
        message="Login successful",
        user=models.User.model_validate(user).model_dump(),
    )


@router.options("/login")
@router.options("/logout")
@router.options("/session")
def auth_preflight():
    return preflight()


@router.post("/login")
def login_endpoint(request: Request, payload: Optional[models.LoginRequest] = None, db: Session = Depends(get_db)):
    return dispatch(db, login, payload or models.LoginRequest(), request.session)


@router.post("/logout")
def logout_endpoint(request: Request):
    request.session.clear()
    return ApiResponse.succeed(message="Logged out").to_json_response()


@router.get("/session")
def session_endpoint(request: Request):
    if not request.session.get("logged_in"):
        return ApiResponse.fail("Not logged in", status_code=401).to_json_response()
    return ApiResponse.succeed(
        data={key: request.session.get(key) for key in SESSION_KEYS}
    ).to_json_response()
