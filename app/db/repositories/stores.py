import logging

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased

from app.db.enums import Role
from app.db.models.rating import Rating
from app.db.models.store import Store
from app.db.models.user import User
from app.db.repositories._query import apply_sort, count_rows, paginate
from app.errors import BadRequest, Conflict, NotFound

logger = logging.getLogger(__name__)


def rating_stats_subquery():
    return (
        select(
            Rating.store_id.label("store_id"),
            func.avg(Rating.rating).label("average_rating"),
            func.count(Rating.id).label("total_ratings"),
        )
        .group_by(Rating.store_id)
        .subquery("rating_stats")
    )


def _aggregate_columns(stats):
    return (
        func.coalesce(stats.c.average_rating, 0).label("average_rating"),
        func.coalesce(stats.c.total_ratings, 0).label("total_ratings"),
    )


def _store_filters(name=None, email=None, address=None):
    conditions = []
    if name:
        conditions.append(Store.name.icontains(name, autoescape=True))
    if email:
        conditions.append(Store.email.icontains(email, autoescape=True))
    if address:
        conditions.append(Store.address.icontains(address, autoescape=True))
    return conditions


def _store_view(store: Store, average_rating, total_ratings) -> dict:
    return {
        "id": store.id,
        "name": store.name,
        "email": store.email,
        "address": store.address,
        "owner_id": store.owner_id,
        "created_at": store.created_at,
        "average_rating": float(average_rating or 0),
        "total_ratings": int(total_ratings or 0),
    }


def get_store(db, store_id: int) -> Store | None:
    return db.get(Store, store_id)


def create_store(db, name: str, email: str, address: str, owner_id: int | None = None) -> Store:
    email = email.strip().lower()
    existing = db.execute(select(Store.id).where(Store.email == email)).scalar_one_or_none()
    if existing is not None:
        raise Conflict("Store already exists with this email")

    if owner_id is not None:
        owner = db.get(User, owner_id)
        if owner is None:
            raise BadRequest("Owner not found")
        if owner.role != Role.STORE_OWNER:
            raise BadRequest("Owner must have store_owner role")

    store = Store(name=name, email=email, address=address, owner_id=owner_id)
    db.add(store)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Store already exists with this email")

    db.refresh(store)
    logger.info("Created store id=%s owner_id=%s", store.id, store.owner_id)
    return store


def list_stores(
    db,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    page: int = 1,
    limit: int = 10,
    viewer: User | None = None,
):
    stats = rating_stats_subquery()
    average_rating, total_ratings = _aggregate_columns(stats)
    conditions = _store_filters(name, email, address)

    columns = [Store, average_rating, total_ratings]
    query = select(*columns).outerjoin(stats, stats.c.store_id == Store.id)

    if viewer is not None:
        own_rating = aliased(Rating, name="own_rating")
        query = query.add_columns(own_rating.rating.label("user_rating")).outerjoin(
            own_rating,
            and_(own_rating.store_id == Store.id, own_rating.user_id == viewer.id),
        )

    sort_columns = {
        "name": Store.name,
        "email": Store.email,
        "address": Store.address,
        "average_rating": average_rating,
        "created_at": Store.created_at,
    }
    query = apply_sort(query.where(*conditions), sort_columns, sort_by, sort_order)
    rows = db.execute(paginate(query.order_by(Store.id), page, limit)).all()

    stores = []
    for row in rows:
        view = _store_view(row[0], row.average_rating, row.total_ratings)
        if viewer is not None:
            view["user_rating"] = row.user_rating
        stores.append(view)

    return stores, count_rows(db, Store, *conditions)


def get_store_detail(db, store_id: int, viewer: User) -> dict:
    stats = rating_stats_subquery()
    average_rating, total_ratings = _aggregate_columns(stats)

    row = db.execute(
        select(Store, average_rating, total_ratings)
        .outerjoin(stats, stats.c.store_id == Store.id)
        .where(Store.id == store_id)
    ).one_or_none()

    if row is None:
        raise NotFound("Store not found")

    view = _store_view(row[0], row.average_rating, row.total_ratings)
    view["user_rating"] = db.execute(
        select(Rating.rating).where(Rating.store_id == store_id, Rating.user_id == viewer.id)
    ).scalar_one_or_none()
    return view


def owned_store_summaries(db, owner_id: int) -> list[dict]:
    stats = rating_stats_subquery()
    average_rating, total_ratings = _aggregate_columns(stats)

    rows = db.execute(
        select(Store, average_rating, total_ratings)
        .outerjoin(stats, stats.c.store_id == Store.id)
        .where(Store.owner_id == owner_id)
        .order_by(Store.name, Store.id)
    ).all()

    return [_store_view(row[0], row.average_rating, row.total_ratings) for row in rows]


def count_stores(db) -> int:
    return count_rows(db, Store)
