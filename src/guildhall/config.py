"""
Configuration management for Guildhall backend
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Public URL the API is reachable at (used to build image URLs)
    app_url: str = "http://localhost:8088"

    # Database
    database_url: str = "sqlite+aiosqlite:///./guildhall.db"
    sql_echo: bool = False

    # Image uploads, stored under <cwd>/<public_dir>/images
    public_dir: str = "public"
    max_upload_size: int = 10 * 1024 * 1024  # 10MB
    allowed_image_extensions: list[str] = [
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".webp",
    ]

    # Auth
    auth_provider: str = "none"  # 'none', 'jwt'
    auth_config: dict = {}
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8088
    api_reload: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = True
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "GUILDHALL_"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
