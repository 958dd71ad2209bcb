from pydantic import BaseModel

from app.db.repositories._query import page_count


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=page_count(total, limit))


class MessageResponse(BaseModel):
    message: str
