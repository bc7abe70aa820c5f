from fastapi import APIRouter, status

from app.core.config import SettingsDep
from app.dependencies import CurrentUser, DbSession
from app.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserRead,
    UserResponse,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: DbSession, settings: SettingsDep):
    """Register a new user"""
    user, token = await AuthService.register(data, db, settings)
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: DbSession, settings: SettingsDep):
    user, token = await AuthService.login(data, db, settings)
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser):
    """Get the authenticated user"""
    return UserResponse(user=UserRead.model_validate(user))
