from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from app.api.deps import get_current_user, get_db, get_optional_user
from app.db.base import MAX_ID
from app.db.models.user import User
from app.db.repositories import stores as stores_repo
from app.schemas.common import Pagination
from app.schemas.store import StoreDetailResponse, StoreListResponse

router = APIRouter(prefix="/stores", tags=["Stores"])

# user_rating is only emitted for authenticated callers
@router.get("", response_model=StoreListResponse, response_model_exclude_unset=True)
def list_stores(
    name: str | None = None,
    address: str | None = None,
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    viewer: User | None=Depends(get_optional_user),
    db: Session=Depends(get_db),
):
    stores, total = stores_repo.list_stores(
        db,
        name=name,
        address=address,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
        viewer=viewer,
    )
    return {"stores": stores, "pagination": Pagination.build(page, limit, total)}

@router.get("/{store_id}", response_model=StoreDetailResponse)
def get_store(
    store_id: int = Path(..., ge=1, le=MAX_ID),
    user: User=Depends(get_current_user),
    db: Session=Depends(get_db),
):
    return {"store": stores_repo.get_store_detail(db, store_id, viewer=user)}
