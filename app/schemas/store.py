from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from app.schemas.common import Pagination
from app.db.base import MAX_ID
from app.db.models.user import ADDRESS_MAX_LENGTH


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    address: str = Field(..., max_length=ADDRESS_MAX_LENGTH)
    owner_id: int | None = Field(None, gt=0, le=MAX_ID)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Store name is required")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("owner_id", mode="before")
    @classmethod
    def blank_owner_is_none(cls, value):
        if value == "":
            return None
        return value

class StoreRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    address: str
    created_at: datetime | None = None
    average_rating: float = 0.0
    total_ratings: int = 0

class StoreView(StoreRead):
    user_rating: int | None = None

class AdminStoreView(StoreRead):
    owner_id: int | None = None

class StoreCreated(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    address: str
    owner_id: int | None = None
    created_at: datetime | None = None

class StoreCreatedResponse(BaseModel):
    message: str
    store: StoreCreated

class StoreListResponse(BaseModel):
    stores: list[StoreView]
    pagination: Pagination

class AdminStoreListResponse(BaseModel):
    stores: list[AdminStoreView]
    pagination: Pagination

class StoreDetailResponse(BaseModel):
    store: StoreView
