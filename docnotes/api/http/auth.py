from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from docnotes.core.auth import get_current_user
from docnotes.core.db import get_db
from docnotes.domains.identity.entities import User
from docnotes.domains.identity.schemas import UserCreate, UserLogin, UserResponse, UserUpdate, Token
from docnotes.domains.identity.services import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Регистрация нового пользователя"""
    identity_service = IdentityService(db)
    return await identity_service.register_user(user_data)


@router.post("/login", response_model=Token)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Вход пользователя"""
    identity_service = IdentityService(db)
    token = await identity_service.login_user(login_data)
    return Token(access_token=token)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Информация о текущем пользователе"""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    update_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Обновление отображаемого имени текущего пользователя"""
    identity_service = IdentityService(db)
    return await identity_service.update_user_profile(current_user, update_data)
