from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from app.db.enums import Role
from app.schemas.common import Pagination
from app.schemas.store import StoreRead
from app.db.models.user import ADDRESS_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH
from app.services.security import password_policy_errors


def _check_password(value: str) -> str:
    errors = password_policy_errors(value)
    if errors:
        raise ValueError("; ".join(errors))
    return value


class UserCreate(BaseModel):
    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    password: str
    address: str = Field(..., max_length=ADDRESS_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)

class AdminUserCreate(UserCreate):
    role: Role = Role.USER

class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    address: str
    role: Role
    created_at: datetime | None = None

class UserDetail(UserRead):
    store: StoreRead | None = None
    stores: list[StoreRead] = Field(default_factory=list)

class UserResponse(BaseModel):
    user: UserRead

class UserCreatedResponse(UserResponse):
    message: str

class UserDetailResponse(BaseModel):
    user: UserDetail

class UserListResponse(BaseModel):
    users: list[UserRead]
    pagination: Pagination
