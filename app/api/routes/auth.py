from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.api.deps import get_current_user, get_db
from app.db.models.user import User
from app.schemas.auth import AuthResponse, LoginRequest, PasswordChangeRequest, RegisterRequest
from app.schemas.common import MessageResponse
from app.schemas.user import UserResponse
from app.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session=Depends(get_db)):
    user, token = auth_service.register(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        address=payload.address,
    )
    return AuthResponse(message="User registered successfully", user=user, token=token)

@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session=Depends(get_db)):
    user, token = auth_service.login(db, payload.email, payload.password)
    return AuthResponse(message="Login successful", user=user, token=token)

@router.put("/password", response_model=MessageResponse)
def change_password(
    payload: PasswordChangeRequest,
    user: User=Depends(get_current_user),
    db: Session=Depends(get_db),
):
    auth_service.change_password(db, user, payload.current_password, payload.new_password)
    return MessageResponse(message="Password updated successfully")

@router.get("/me", response_model=UserResponse)
def me(user: User=Depends(get_current_user)):
    return UserResponse(user=user)
