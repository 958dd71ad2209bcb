from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from app.db.base import MAX_ID
from app.db.models.rating import MAX_RATING, MIN_RATING
from app.schemas.common import Pagination


class RatingSubmit(BaseModel):
    store_id: int = Field(..., gt=0, le=MAX_ID)
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)

class RatingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    store_id: int
    rating: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

class RatingSubmitResponse(BaseModel):
    message: str
    rating: RatingRead

class RatingWithStore(BaseModel):
    id: int
    rating: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    store_id: int
    store_name: str
    store_address: str

class RatingWithUser(BaseModel):
    id: int
    rating: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user_id: int
    user_name: str
    user_email: str

class MyRatingsResponse(BaseModel):
    ratings: list[RatingWithStore]
    pagination: Pagination

class StoreRatingsResponse(BaseModel):
    store_id: int
    average_rating: float
    total_ratings: int
    ratings: list[RatingWithUser]
    pagination: Pagination

class StoreSummary(BaseModel):
    store_id: int
    store_name: str
    store_address: str
    average_rating: float
    total_ratings: int

class MyStoresResponse(BaseModel):
    stores: list[StoreSummary]
