import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from docnotes.core.errors import UnauthorizedError, ValidationFailedError, upstream_guard
from docnotes.core.security import create_access_token, verify_token
from docnotes.db.repositories.user_repository import UserRepository
from docnotes.domains.identity.entities import User
from docnotes.domains.identity.schemas import UserCreate, UserLogin, UserUpdate

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    @upstream_guard("Failed to create user")
    async def register_user(self, user_data: UserCreate) -> User:
        """Регистрация: уникальность никнейма проверяется до создания аккаунта"""
        if await self.user_repository.nickname_exists(user_data.nickname):
            raise ValidationFailedError("Nickname already exists")

        if await self.user_repository.email_exists(user_data.email):
            raise ValidationFailedError("Email already registered")

        user = User.create_user(
            email=user_data.email,
            nickname=user_data.nickname,
            password=user_data.password,
            display_name=user_data.display_name
        )

        created = await self.user_repository.create(user)
        logger.info(f"User {created.nickname} registered")
        return created

    @upstream_guard("Failed to sign in")
    async def login_user(self, login_data: UserLogin) -> str:
        """Вход пользователя и создание JWT токена"""
        user = await self.user_repository.get_by_email(login_data.email)

        if not user or not user.is_active or not user.authenticate(login_data.password):
            raise UnauthorizedError("Incorrect email or password")

        return create_access_token(data={"sub": str(user.id), "nickname": user.nickname})

    @upstream_guard("Failed to update user")
    async def update_user_profile(self, user: User, update_data: UserUpdate) -> User:
        """Обновление отображаемого имени"""
        user.update_profile(display_name=update_data.display_name)
        return await self.user_repository.update(user)

    @upstream_guard("Failed to verify credentials")
    async def get_current_user_from_token(self, token: str) -> Optional[User]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)
        if not payload:
            return None

        try:
            user_id = uuid.UUID(str(payload.get("sub") or ""))
        except ValueError:
            return None

        user = await self.user_repository.get_by_id(user_id)
        if user is None or not user.is_active:
            return None

        return user
