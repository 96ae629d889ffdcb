from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from docnotes.core.config import settings
from docnotes.db.base import Base

engine_options = {"echo": settings.sql_echo, "future": True}
if settings.database_url.startswith("sqlite"):
    # aiosqlite-соединения не переиспользуются между event loop'ами
    engine_options["poolclass"] = NullPool

# Асинхронный движок
engine = create_async_engine(settings.database_url, **engine_options)

# Сессии
SessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """Зависимость FastAPI: сессия БД на время запроса"""
    async with SessionLocal() as session:
        yield session


async def init_models() -> None:
    """Создание таблиц (для разработки и тестов; в продакшене - alembic)"""
    import docnotes.db.models  # noqa: F401  регистрирует модели в metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_models() -> None:
    import docnotes.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
