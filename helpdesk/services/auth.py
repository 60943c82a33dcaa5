from __future__ import annotations

from datetime import timedelta
from typing import Any

import jwt
from loguru import logger
from nanoid import generate
from werkzeug.security import check_password_hash, generate_password_hash

from helpdesk.core.config import get_settings
from helpdesk.schemas import Role, User, UserCreate
from helpdesk.schemas.enums import ASSIGNABLE_ROLES
from helpdesk.services.repositories import UserRepository
from helpdesk.utils.time import utc_now

JWT_ALGORITHM = "HS256"
LOGIN_FAILED_MESSAGE = "Invalid email or password"

DEFAULT_USERS = [
    {"id": "1", "name": "Gladson Lawrence", "email": "gladson.lawrence@gmis.sch.id", "role": Role.ADMIN},
    {"id": "2", "name": "John Tech", "email": "john@school.edu", "role": Role.SUPPORT},
]
DEFAULT_PASSWORD = "password"


class AuthenticationError(Exception):
    """Login or token check failed. The message never says which part was wrong."""


def hash_password(password: str) -> str:
    return generate_password_hash(password, method="pbkdf2:sha256")


def verify_password(password_hash: str, password: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def authenticate(users: UserRepository, email: str, password: str) -> User:
    user = users.get_by_email(email)
    if user is None or not verify_password(user.password_hash, password):
        logger.info("Failed login attempt for {email}", email=email)
        raise AuthenticationError(LOGIN_FAILED_MESSAGE)
    logger.info("Staff login id={user_id}", user_id=user.id)
    return user


def issue_token(user: User) -> str:
    settings = get_settings()
    now = utc_now()
    payload = {
        "sub": user.id,
        "email": user.email,
        "role": user.role.value,
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_expiry_hours),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, get_settings().jwt_secret_key, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid or expired token") from exc


def resolve_token_user(users: UserRepository, token: str) -> User:
    claims = decode_token(token)
    user = users.get_by_id(str(claims.get("sub", "")))
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return user


def create_user(users: UserRepository, payload: UserCreate) -> User:
    if users.get_by_email(payload.email) is not None:
        raise ValueError(f"A staff account for {payload.email} already exists")
    user = User(
        id=generate(size=10),
        name=payload.name,
        email=payload.email,
        role=payload.role,
        password_hash=hash_password(payload.password),
    )
    return users.add(user)


def assignable_staff(users: UserRepository) -> list[User]:
    return [user for user in users.list() if user.role in ASSIGNABLE_ROLES]


def seed_default_users(users: UserRepository) -> int:
    if users.list():
        return 0
    for entry in DEFAULT_USERS:
        users.add(User(**entry, password_hash=hash_password(DEFAULT_PASSWORD)))
    logger.info("Seeded {count} default staff accounts", count=len(DEFAULT_USERS))
    return len(DEFAULT_USERS)
