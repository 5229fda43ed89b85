from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Short Links"

    # Storage (Env Vars - SQLite unless overridden)
    DATABASE_URL: str = "sqlite:///./shortlinks.db"

    # Redirect cache; empty string disables it
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL: int = 86400

    BASE_URL: str = "http://localhost:8080"

    # Short codes
    SHORT_CODE_LENGTH: int = 6
    SHORT_CODE_MAX_ATTEMPTS: int = 10
    VANITY_MAX_LENGTH: int = 32
    URL_MAX_LENGTH: int = 2048

    # QR images (external provider, best effort)
    QR_ENABLED: bool = True
    QR_API_URL: str = "https://api.qrserver.com/v1/create-qr-code/"
    QR_TIMEOUT_SECONDS: float = 5.0
    MEDIA_PATH: str = "./media"

    CLICK_RECORD_ATTEMPTS: int = 3
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env")

settings = Settings()
