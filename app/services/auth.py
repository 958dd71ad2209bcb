"""Registration, login and bearer token verification."""
import logging

from app.db.enums import Role
from app.db.models.user import ADDRESS_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH, User
from app.db.repositories import users as users_repo
from app.errors import BadRequest, Unauthorized
from app.services.security import (
    InvalidToken,
    create_access_token,
    decode_access_token,
    hash_password,
    password_policy_errors,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def validate_user_fields(name: str, address: str, password: str, password_field: str = "password") -> None:
    errors = []
    if not NAME_MIN_LENGTH <= len(name or "") <= NAME_MAX_LENGTH:
        errors.append({"field": "name", "message": f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"})
    if len(address or "") > ADDRESS_MAX_LENGTH:
        errors.append({"field": "address", "message": f"Address must not exceed {ADDRESS_MAX_LENGTH} characters"})
    errors.extend({"field": password_field, "message": message} for message in password_policy_errors(password or ""))

    if errors:
        raise BadRequest("Validation failed", errors=errors)


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.email, user.role)


def create_account(db, name: str, email: str, password: str, address: str, role: Role = Role.USER) -> User:
    validate_user_fields(name, address, password)
    return users_repo.create_user(
        db,
        name=name,
        email=email,
        password_hash=hash_password(password),
        address=address,
        role=role,
    )


def register(db, name: str, email: str, password: str, address: str) -> tuple[User, str]:
    user = create_account(db, name, email, password, address, role=Role.USER)
    logger.info("Registered user id=%s", user.id)
    return user, issue_token(user)


def login(db, email: str, password: str) -> tuple[User, str]:
    user = users_repo.get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise Unauthorized(INVALID_CREDENTIALS)

    return user, issue_token(user)


def verify_token(db, token: str | None) -> User:
    if not token:
        raise Unauthorized("Access token required")

    try:
        claims = decode_access_token(token)
    except InvalidToken as exc:
        logger.debug("Rejected token: %s", exc)
        raise Unauthorized("Invalid or expired token")

    user = users_repo.get_user(db, claims["user_id"])
    if user is None:
        raise Unauthorized("Invalid or expired token")
    return user


def change_password(db, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise Unauthorized("Current password is incorrect")

    errors = [{"field": "newPassword", "message": message} for message in password_policy_errors(new_password)]
    if errors:
        raise BadRequest("Validation failed", errors=errors)

    users_repo.update_password_hash(db, user, hash_password(new_password))
    logger.info("Password changed for user id=%s", user.id)
