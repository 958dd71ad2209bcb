from app.db.models.user import User
from app.db.models.store import Store
from app.db.models.rating import Rating

__all__ = ["User", "Store", "Rating"]
