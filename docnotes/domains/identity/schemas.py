from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime
import uuid


def _validate_nickname(v):
    if not v.replace('_', '').replace('-', '').replace('.', '').isalnum():
        raise ValueError('Nickname must contain only alphanumeric characters, dots, underscores, and hyphens')
    return v


class UserCreate(BaseModel):
    """Схема для регистрации пользователя"""
    email: EmailStr
    nickname: str = Field(..., min_length=2, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator('nickname')
    @classmethod
    def validate_nickname(cls, v):
        return _validate_nickname(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if not any(c.isupper() for c in v):
            raise ValueError('Password must contain at least one uppercase letter')
        if not any(c.islower() for c in v):
            raise ValueError('Password must contain at least one lowercase letter')
        if not any(c.isdigit() for c in v):
            raise ValueError('Password must contain at least one digit')
        return v


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    """Изменяемы только отображаемые поля"""
    display_name: Optional[str] = Field(None, max_length=100)


class UserPublic(BaseModel):
    """Пользователь глазами других пользователей"""
    id: uuid.UUID
    nickname: str
    display_name: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserPublic):
    """Схема для ответа с данными текущего пользователя"""
    email: EmailStr
    created_at: datetime
    updated_at: datetime


class UserSearchResponse(BaseModel):
    users: List[UserPublic]


class Token(BaseModel):
    """Схема для JWT токена"""
    access_token: str
    token_type: str = "bearer"
