import logging

from sqlalchemy import String, cast, select
from sqlalchemy.exc import IntegrityError

from app.db.enums import Role
from app.db.models.user import User
from app.db.repositories._query import apply_sort, count_rows, paginate
from app.db.repositories.stores import owned_store_summaries
from app.errors import Conflict, NotFound

logger = logging.getLogger(__name__)

USER_SORT_COLUMNS = {
    "name": User.name,
    "email": User.email,
    "address": User.address,
    "role": cast(User.role, String),
    "created_at": User.created_at,
}

def get_user(db, user_id: int) -> User | None:
    return db.get(User, user_id)

def get_user_by_email(db, email: str) -> User | None:
    return db.execute(
        select(User).where(User.email == email.strip().lower())
    ).scalar_one_or_none()

def create_user(db, name: str, email: str, password_hash: str, address: str, role: Role = Role.USER) -> User:
    email = email.strip().lower()
    if get_user_by_email(db, email) is not None:
        raise Conflict("User already exists with this email")

    user = User(name=name, email=email, password_hash=password_hash, address=address, role=role or Role.USER)
    db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User already exists with this email")

    db.refresh(user)
    logger.info("Created user id=%s role=%s", user.id, user.role)
    return user

def update_password_hash(db, user: User, password_hash: str) -> None:
    user.password_hash = password_hash
    db.commit()

def _user_filters(name=None, email=None, address=None, role=None):
    conditions = []
    if name:
        conditions.append(User.name.icontains(name, autoescape=True))
    if email:
        conditions.append(User.email.icontains(email, autoescape=True))
    if address:
        conditions.append(User.address.icontains(address, autoescape=True))
    if role:
        conditions.append(User.role == Role(role))
    return conditions

def list_users(
    db,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: Role | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    page: int = 1,
    limit: int = 10,
):
    conditions = _user_filters(name, email, address, role)

    query = apply_sort(select(User).where(*conditions), USER_SORT_COLUMNS, sort_by, sort_order)
    users = db.execute(paginate(query.order_by(User.id), page, limit)).scalars().all()

    return users, count_rows(db, User, *conditions)

def get_user_detail(db, user_id: int) -> dict:
    user = get_user(db, user_id)
    if user is None:
        raise NotFound("User not found")

    detail = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "address": user.address,
        "role": user.role,
        "created_at": user.created_at,
    }

    if user.role == Role.STORE_OWNER:
        stores = owned_store_summaries(db, user.id)
        detail["stores"] = stores
        detail["store"] = stores[0] if stores else None

    return detail

def count_users(db) -> int:
    return count_rows(db, User)
