import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.db.models.rating import MAX_RATING, MIN_RATING, Rating
from app.db.models.store import Store
from app.db.models.user import User
from app.db.models._timestamps import utcnow
from app.db.repositories._query import count_rows, paginate
from app.db.repositories.stores import owned_store_summaries
from app.errors import BadRequest, Forbidden, NotFound

logger = logging.getLogger(__name__)


def _existing_rating(db, user_id: int, store_id: int) -> Rating | None:
    return db.execute(
        select(Rating)
        .where(Rating.user_id == user_id, Rating.store_id == store_id)
        .with_for_update()
    ).scalar_one_or_none()


def _apply_rating(db, existing: Rating, rating: int) -> Rating:
    existing.rating = rating
    existing.updated_at = utcnow()
    db.commit()
    db.refresh(existing)
    return existing


def submit_rating(db, user_id: int, store_id: int, rating: int) -> tuple[Rating, bool]:
    """Insert or update the caller's rating for a store.

    Returns the rating row and whether it was newly created. A concurrent
    insert for the same (user, store) pair trips the unique constraint; the
    losing request rolls back and applies its value as an update instead.
    """
    if not isinstance(rating, int) or isinstance(rating, bool) or not MIN_RATING <= rating <= MAX_RATING:
        raise BadRequest(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

    if db.get(Store, store_id) is None:
        raise NotFound("Store not found")

    existing = _existing_rating(db, user_id, store_id)
    if existing is not None:
        updated = _apply_rating(db, existing, rating)
        logger.info("Updated rating id=%s user_id=%s store_id=%s rating=%s", updated.id, user_id, store_id, rating)
        return updated, False

    entry = Rating(user_id=user_id, store_id=store_id, rating=rating)
    db.add(entry)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = _existing_rating(db, user_id, store_id)
        if existing is None:
            raise
        logger.info("Rating insert raced for user_id=%s store_id=%s, updating instead", user_id, store_id)
        return _apply_rating(db, existing, rating), False

    db.refresh(entry)
    logger.info("Created rating id=%s user_id=%s store_id=%s rating=%s", entry.id, user_id, store_id, rating)
    return entry, True


def get_rating_summary(db, store_id: int) -> tuple[float, int]:
    average_rating, total_ratings = db.execute(
        select(func.coalesce(func.avg(Rating.rating), 0), func.count(Rating.id))
        .where(Rating.store_id == store_id)
    ).one()

    return float(average_rating or 0), int(total_ratings or 0)


def my_ratings(db, user_id: int, page: int = 1, limit: int = 10):
    rows = db.execute(
        paginate(
            select(
                Rating.id,
                Rating.rating,
                Rating.created_at,
                Rating.updated_at,
                Store.id.label("store_id"),
                Store.name.label("store_name"),
                Store.address.label("store_address"),
            )
            .join(Store, Store.id == Rating.store_id)
            .where(Rating.user_id == user_id)
            .order_by(Rating.updated_at.desc(), Rating.id.desc()),
            page,
            limit,
        )
    ).mappings().all()

    return [dict(row) for row in rows], count_rows(db, Rating, Rating.user_id == user_id)


def store_ratings(db, store_id: int, requester: User, page: int = 1, limit: int = 10) -> dict:
    store = db.get(Store, store_id)
    if store is None:
        raise NotFound("Store not found")

    if not requester.is_admin and store.owner_id != requester.id:
        raise Forbidden("You do not own this store")

    rows = db.execute(
        paginate(
            select(
                Rating.id,
                Rating.rating,
                Rating.created_at,
                Rating.updated_at,
                User.id.label("user_id"),
                User.name.label("user_name"),
                User.email.label("user_email"),
            )
            .join(User, User.id == Rating.user_id)
            .where(Rating.store_id == store_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc()),
            page,
            limit,
        )
    ).mappings().all()

    average_rating, total_ratings = get_rating_summary(db, store_id)

    return {
        "store_id": store_id,
        "average_rating": average_rating,
        "total_ratings": total_ratings,
        "ratings": [dict(row) for row in rows],
        "total": total_ratings,
    }


def my_stores_summary(db, owner_id: int) -> list[dict]:
    return [
        {
            "store_id": store["id"],
            "store_name": store["name"],
            "store_address": store["address"],
            "average_rating": store["average_rating"],
            "total_ratings": store["total_ratings"],
        }
        for store in owned_store_summaries(db, owner_id)
    ]


def count_ratings(db) -> int:
    return count_rows(db, Rating)
