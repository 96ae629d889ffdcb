import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from docnotes.api.http import (
    auth_router, users_router, documents_router, shares_router,
    blocks_router, search_router, notes_router, public_router
)
from docnotes.core.config import settings
from docnotes.core.db import init_models
from docnotes.core.errors import DomainError

logging.basicConfig(
    level=settings.log_level.upper(), format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        await init_models()
    yield


app = FastAPI(
    title="DocNotes",
    description="Документы из блоков с общим доступом и публикацией",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "reason": "validation_error", "details": errors}
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "reason": "internal_error"}
    )


# Локальное хранилище изображений раздается самим приложением
if settings.blob_backend == "local":
    os.makedirs(settings.media_root, exist_ok=True)
    app.mount(settings.media_url, StaticFiles(directory=settings.media_root), name="media")

# Подключаем роутеры
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(documents_router)
app.include_router(shares_router)
app.include_router(blocks_router)
app.include_router(search_router)
app.include_router(notes_router)
app.include_router(public_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "DocNotes API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health():
    return {"status": "ok"}
