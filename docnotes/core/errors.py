"""
Таксономия ошибок предметной области.

Сервисы поднимают только наследников DomainError; ошибки нижних слоев
(БД, файловое хранилище) переводятся в UpstreamError декоратором upstream_guard.
"""

import functools
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class BlobStoreError(Exception):
    """Сбой внешнего хранилища файлов"""


class DomainError(Exception):
    """Базовая ошибка: HTTP-статус, машинно-проверяемая причина и сообщение"""

    status_code = 500
    reason = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "reason": self.reason}


class UnauthorizedError(DomainError):
    status_code = 401
    reason = "unauthorized"
    default_message = "Unauthorized"


class ForbiddenError(DomainError):
    status_code = 403
    reason = "forbidden"
    default_message = "Access denied"


class NotFoundError(DomainError):
    status_code = 404
    reason = "not_found"
    default_message = "Document not found or access denied"


class ValidationFailedError(DomainError):
    status_code = 400
    reason = "validation_error"
    default_message = "Invalid request"


class UpstreamError(DomainError):
    status_code = 500
    reason = "upstream_error"


class VersionConflictError(DomainError):
    """Устаревший номер версии при оптимистичной блокировке"""

    status_code = 409
    reason = "version_conflict"
    default_message = "Version conflict"

    def __init__(self, current_version: int, client_version: int):
        self.current_version = current_version
        self.client_version = client_version
        super().__init__()

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["currentVersion"] = self.current_version
        payload["clientVersion"] = self.client_version
        return payload


def upstream_guard(message: str):
    """Переводит сбои БД и хранилища в UpstreamError с заданным сообщением"""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except (SQLAlchemyError, BlobStoreError) as e:
                logger.error(f"{func.__qualname__} failed: {e}")
                raise UpstreamError(message) from e

        return wrapper

    return decorator
