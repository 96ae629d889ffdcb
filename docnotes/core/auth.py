from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from docnotes.core.db import get_db
from docnotes.core.errors import UnauthorizedError
from docnotes.domains.identity.entities import User
from docnotes.domains.identity.services import IdentityService

# auto_error=False: отсутствие заголовка - 401, а не 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Зависимость для получения текущего пользователя по Bearer-токену"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError()

    identity_service = IdentityService(db)
    user = await identity_service.get_current_user_from_token(credentials.credentials)

    if not user:
        raise UnauthorizedError("Could not validate credentials")

    return user
