from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
import uuid

from docnotes.core.errors import ValidationFailedError
from docnotes.db.models.user import User as UserModel
from docnotes.domains.identity.entities import User


class UserRepository:
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Создание нового пользователя"""
        db_user = UserModel(
            id=user.id,
            email=user.email,
            nickname=user.nickname,
            display_name=user.display_name,
            password_hash=user.password_hash,
            is_active=user.is_active
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValidationFailedError("User with this email or nickname already exists")

        await self.session.refresh(db_user)
        return self._to_domain(db_user)

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Получение пользователя по id"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Получение пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_nickname(self, nickname: str) -> Optional[User]:
        """Получение пользователя по никнейму"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.nickname == nickname)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def update(self, user: User) -> User:
        """Обновление отображаемых полей пользователя"""
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(
                display_name=user.display_name,
                is_active=user.is_active,
                updated_at=user.updated_at
            )
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_id(user.id)

    async def search_by_nickname(
        self,
        query: str,
        exclude_id: Optional[uuid.UUID] = None,
        limit: int = 10
    ) -> List[User]:
        """Поиск по подстроке никнейма без учета регистра"""
        stmt = select(UserModel).where(UserModel.nickname.icontains(query, autoescape=True))

        if exclude_id is not None:
            stmt = stmt.where(UserModel.id != exclude_id)

        result = await self.session.execute(stmt.order_by(UserModel.nickname).limit(limit))
        return [self._to_domain(user) for user in result.scalars().all()]

    async def email_exists(self, email: str) -> bool:
        """Проверка существования email"""
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.email == email)
        )
        return result.scalar_one_or_none() is not None

    async def nickname_exists(self, nickname: str) -> bool:
        """Проверка существования никнейма"""
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.nickname == nickname)
        )
        return result.scalar_one_or_none() is not None

    def _to_domain(self, db_user: UserModel) -> User:
        """Преобразование модели БД в доменную сущность"""
        return User(
            id=db_user.id,
            email=db_user.email,
            nickname=db_user.nickname,
            display_name=db_user.display_name,
            password_hash=db_user.password_hash,
            is_active=db_user.is_active,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
