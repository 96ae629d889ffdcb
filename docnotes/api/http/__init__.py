from docnotes.api.http.auth import router as auth_router
from docnotes.api.http.users import router as users_router
from docnotes.api.http.documents import router as documents_router
from docnotes.api.http.shares import router as shares_router
from docnotes.api.http.blocks import router as blocks_router
from docnotes.api.http.search import router as search_router
from docnotes.api.http.notes import router as notes_router
from docnotes.api.http.public import router as public_router

__all__ = [
    "auth_router",
    "users_router",
    "documents_router",
    "shares_router",
    "blocks_router",
    "search_router",
    "notes_router",
    "public_router"
]
