from collections.abc import Generator

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.db.enums import Role
from app.db.models.user import User
from app.db.session import SessionLocal
from app.errors import Forbidden, Unauthorized
from app.services import auth as auth_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    return auth_service.verify_token(db, token)


def get_optional_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User | None:
    if not token:
        return None
    try:
        return auth_service.verify_token(db, token)
    except Unauthorized:
        return None


def require_roles(*roles: Role):
    allowed = frozenset(Role(role) for role in roles)

    def role_guard(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise Forbidden("Insufficient permissions")
        return user

    return role_guard
