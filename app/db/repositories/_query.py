from math import ceil

from sqlalchemy import func, select

from app.db.enums import SortOrder


def apply_sort(query, sort_columns: dict, sort_by: str | None, sort_order: str | None, default: str = "name"):
    column = sort_columns.get(sort_by or default, sort_columns[default])
    if SortOrder.parse(sort_order) == SortOrder.DESC:
        return query.order_by(column.desc())
    return query.order_by(column.asc())


def paginate(query, page: int, limit: int):
    page = max(page, 1)
    return query.limit(limit).offset((page - 1) * limit)


def count_rows(db, model, *conditions) -> int:
    return db.execute(
        select(func.count()).select_from(model).where(*conditions)
    ).scalar_one()


def page_count(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return ceil(total / limit)
