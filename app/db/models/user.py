from datetime import datetime
from app.db.base import Base
from sqlalchemy import DateTime, Enum, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.enums import Role
from app.db.models._timestamps import utcnow

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
ADDRESS_MAX_LENGTH = 400

role_enum = Enum(
    Role,
    name="user_role_enum",
    values_callable=lambda roles: [role.value for role in roles],
    validate_strings=True,
)

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(ADDRESS_MAX_LENGTH), nullable=False, default="")
    role: Mapped[Role] = mapped_column(role_enum, nullable=False, default=Role.USER)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    stores: Mapped[list["Store"]] = relationship(back_populates="owner")
    ratings: Mapped[list["Rating"]] = relationship(back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
