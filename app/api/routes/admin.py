from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from app.api.deps import get_db, require_roles
from app.db.base import MAX_ID
from app.db.enums import Role
from app.db.repositories import ratings as ratings_repo
from app.db.repositories import stores as stores_repo
from app.db.repositories import users as users_repo
from app.schemas.admin import DashboardStats
from app.schemas.common import Pagination
from app.schemas.store import AdminStoreListResponse, StoreCreate, StoreCreatedResponse
from app.schemas.user import AdminUserCreate, UserCreatedResponse, UserDetailResponse, UserListResponse
from app.services import auth as auth_service

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_roles(Role.ADMIN))])

@router.get("/dashboard", response_model=DashboardStats)
def dashboard(db: Session=Depends(get_db)):
    return DashboardStats(
        total_users=users_repo.count_users(db),
        total_stores=stores_repo.count_stores(db),
        total_ratings=ratings_repo.count_ratings(db),
    )

@router.post("/users", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: AdminUserCreate, db: Session=Depends(get_db)):
    user = auth_service.create_account(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        address=payload.address,
        role=payload.role,
    )
    return UserCreatedResponse(message="User created successfully", user=user)

@router.get("/users", response_model=UserListResponse)
def list_users(
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: Role | None = None,
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session=Depends(get_db),
):
    users, total = users_repo.list_users(
        db,
        name=name,
        email=email,
        address=address,
        role=role,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return {"users": users, "pagination": Pagination.build(page, limit, total)}

@router.get("/users/{user_id}", response_model=UserDetailResponse, response_model_exclude_unset=True)
def get_user(user_id: int = Path(..., ge=1, le=MAX_ID), db: Session=Depends(get_db)):
    return {"user": users_repo.get_user_detail(db, user_id)}

@router.post("/stores", response_model=StoreCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_store(payload: StoreCreate, db: Session=Depends(get_db)):
    store = stores_repo.create_store(
        db,
        name=payload.name,
        email=payload.email,
        address=payload.address,
        owner_id=payload.owner_id,
    )
    return StoreCreatedResponse(message="Store created successfully", store=store)

@router.get("/stores", response_model=AdminStoreListResponse)
def list_stores(
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session=Depends(get_db),
):
    stores, total = stores_repo.list_stores(
        db,
        name=name,
        email=email,
        address=address,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return {"stores": stores, "pagination": Pagination.build(page, limit, total)}
