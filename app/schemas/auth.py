from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from app.schemas.user import UserCreate, UserRead, _check_password


class RegisterRequest(UserCreate):
    pass

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

class PasswordChangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., min_length=1, alias="currentPassword")
    new_password: str = Field(..., alias="newPassword")

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, value: str) -> str:
        return _check_password(value)

class AuthResponse(BaseModel):
    message: str
    user: UserRead
    token: str
