import os
import tempfile
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional, List

env = os.getenv("APP_ENV", "development")
env_file = f".env.{env}"

class Settings(BaseSettings):
    # postgresql+asyncpg://... in deployments, sqlite+aiosqlite://... for tests
    database_url: str
    create_tables: bool = False
    # CORS origins can be overridden via CORS_ORIGINS env var (JSON list)
    cors_origins: List[str] = Field(default=["http://localhost:5173"])
    log_level: str = "INFO"

    # JWT configuration
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_days: int = 30

    # Blob storage (Cloudinary)
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "docportal"

    # Uploads are staged here before being relayed to blob storage
    upload_tmp_dir: str = Field(default_factory=lambda: os.path.join(tempfile.gettempdir(), "docportal-uploads"))
    max_document_size: int = 5 * 1024 * 1024
    max_profile_pic_size: int = 2 * 1024 * 1024

    # Document review policy
    allow_re_review: bool = True
    require_file_on_submit: bool = False

    model_config = SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
