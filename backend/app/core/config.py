from datetime import date

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    APP_TITLE: str = "Our Memories"
    FOOTER_TEXT: str | None = None
    FRONTEND_URL: str = "http://localhost:5173"
    FRONTEND_URLS: str | None = None
    LOG_LEVEL: str = "INFO"

    R2_ENDPOINT_URL: str | None = None
    R2_ACCOUNT_ID: str | None = None
    R2_ACCESS_KEY_ID: str | None = None
    R2_SECRET_ACCESS_KEY: str | None = None
    R2_BUCKET_NAME: str | None = None
    R2_REGION: str = "auto"

    MAX_UPLOAD_SIZE_MB: int = 100
    THUMBNAIL_WIDTH: int = 400
    THUMBNAIL_QUALITY: int = 75
    ASSET_CACHE_CONTROL: str = "public, max-age=31536000, immutable"

    # "header" trusts a reverse-proxy header, "token" reads the access_token
    # cookie, "static" always returns DEV_USER_EMAIL.
    AUTH_MODE: str = "header"
    AUTH_HEADER_NAME: str = "cf-access-authenticated-user-email"
    DEV_USER_EMAIL: str = "developer@example.com"
    JWT_SECRET_KEY: str | None = None
    JWT_ALGORITHM: str = "HS256"

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 200
    UPLOAD_RATE_LIMIT: str = "60/minute"
    RATE_LIMIT_ENABLED: bool = True

    class Config:
        env_file = ".env"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def footer_text(self) -> str:
        return self.FOOTER_TEXT or f"© {date.today().year}"

settings = Settings()
