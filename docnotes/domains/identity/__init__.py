from docnotes.domains.identity.entities import User
from docnotes.domains.identity.schemas import (
    UserCreate, UserLogin, UserUpdate, UserPublic, UserResponse, UserSearchResponse, Token
)

__all__ = [
    "User",
    "UserCreate", "UserLogin", "UserUpdate", "UserPublic", "UserResponse",
    "UserSearchResponse", "Token"
]
