from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    log_level: str = "INFO"
    sql_echo: bool = False
    create_tables_on_startup: bool = True
    cors_origins: List[str] = ["*"]

    # Хранилище изображений: "local" или "supabase"
    blob_backend: str = "local"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    storage_bucket: str = "document-images"
    media_root: str = "media"
    media_url: str = "/media"
    max_image_bytes: int = 5 * 1024 * 1024

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
