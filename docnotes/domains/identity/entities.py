import uuid
from datetime import datetime
from typing import Optional

from docnotes.core.security import get_password_hash, verify_password


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: uuid.UUID,
        email: str,
        nickname: str,
        password_hash: str,
        display_name: str = "",
        is_active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.nickname = nickname
        self.display_name = display_name
        self.password_hash = password_hash
        self.is_active = is_active
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    def update_profile(self, display_name: Optional[str] = None) -> None:
        """Обновление профиля; никнейм после регистрации не меняется"""
        if display_name is not None:
            self.display_name = display_name
        self.updated_at = datetime.utcnow()

    @classmethod
    def create_user(cls, email: str, nickname: str, password: str, display_name: Optional[str] = None) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            id=uuid.uuid4(),
            email=email,
            nickname=nickname,
            display_name=display_name or nickname,
            password_hash=get_password_hash(password)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"User(id={self.id}, nickname={self.nickname})"
