from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session
from app.api.deps import get_current_user, get_db, require_roles
from app.db.base import MAX_ID
from app.db.enums import Role
from app.db.models.user import User
from app.db.repositories import ratings as ratings_repo
from app.schemas.common import Pagination
from app.schemas.rating import (
    MyRatingsResponse,
    MyStoresResponse,
    RatingSubmit,
    RatingSubmitResponse,
    StoreRatingsResponse,
)

router = APIRouter(prefix="/ratings", tags=["Ratings"], dependencies=[Depends(get_current_user)])

@router.post("", response_model=RatingSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_rating(
    payload: RatingSubmit,
    response: Response,
    user: User=Depends(get_current_user),
    db: Session=Depends(get_db),
):
    rating, created = ratings_repo.submit_rating(db, user.id, payload.store_id, payload.rating)
    if not created:
        response.status_code = status.HTTP_200_OK
        return RatingSubmitResponse(message="Rating updated successfully", rating=rating)
    return RatingSubmitResponse(message="Rating submitted successfully", rating=rating)

@router.get("/my-ratings", response_model=MyRatingsResponse)
def my_ratings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User=Depends(get_current_user),
    db: Session=Depends(get_db),
):
    ratings, total = ratings_repo.my_ratings(db, user.id, page=page, limit=limit)
    return {"ratings": ratings, "pagination": Pagination.build(page, limit, total)}

@router.get("/my-stores", response_model=MyStoresResponse)
def my_stores(user: User=Depends(require_roles(Role.STORE_OWNER)), db: Session=Depends(get_db)):
    return {"stores": ratings_repo.my_stores_summary(db, user.id)}

@router.get("/store/{store_id}", response_model=StoreRatingsResponse)
def store_ratings(
    store_id: int = Path(..., ge=1, le=MAX_ID),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User=Depends(require_roles(Role.STORE_OWNER, Role.ADMIN)),
    db: Session=Depends(get_db),
):
    result = ratings_repo.store_ratings(db, store_id, user, page=page, limit=limit)
    result["pagination"] = Pagination.build(page, limit, result.pop("total"))
    return result
