from datetime import datetime, timedelta, timezone
import re

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.config.settings import get_settings
from app.db.enums import Role

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16
PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

_UPPERCASE_RE = re.compile(r"[A-Z]")
_SPECIAL_RE = re.compile(f"[{re.escape(PASSWORD_SPECIAL_CHARACTERS)}]")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidToken(Exception):
    pass


def password_policy_errors(password: str) -> list[str]:
    errors = []
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        errors.append(
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        )
    if not _UPPERCASE_RE.search(password) or not _SPECIAL_RE.search(password):
        errors.append("Password must contain at least one uppercase letter and one special character")
    return errors


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # unrecognised or corrupted hash
        return False


def create_access_token(user_id: int, email: str, role: Role, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expires_minutes))
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": Role(role).value,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Return the verified claims of ``token``.

    Raises ``InvalidToken`` for bad signatures, expired tokens and tokens
    whose subject is not a user id.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject.isdigit():
        raise InvalidToken("Token subject is not a user id")

    claims["user_id"] = int(subject)
    return claims
