import enum

class Role(enum.StrEnum):
    ADMIN = "admin"
    USER = "user"
    STORE_OWNER = "store_owner"

class SortOrder(enum.StrEnum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str | None) -> "SortOrder":
        if value and value.strip().lower() == cls.DESC:
            return cls.DESC
        return cls.ASC
