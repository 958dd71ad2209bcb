from datetime import datetime
from app.db.base import Base
from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.models._timestamps import utcnow

MIN_RATING = 1
MAX_RATING = 5

class Rating(Base):
    __tablename__ = "ratings"

    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_ratings_user_id_store_id"),
        CheckConstraint(f"rating BETWEEN {MIN_RATING} AND {MAX_RATING}", name="ck_ratings_rating_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    store_id: Mapped[int] = mapped_column(ForeignKey("stores.id"), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="ratings")
    store: Mapped["Store"] = relationship(back_populates="ratings")
