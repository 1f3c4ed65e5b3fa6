from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "English Center Exam Bank"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Database Configuration
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: Optional[str] = None
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None

    DATABASE_URL: str = "sqlite:///./english_center.db"
    TEST_DATABASE_URL: Optional[str] = None

    def __init__(self, **data):
        super().__init__(**data)
        if all([self.DATABASE_HOST, self.DATABASE_PORT, self.DATABASE_USER,
                self.DATABASE_PASSWORD, self.DATABASE_NAME]):
            self.DATABASE_URL = (
                f'postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}'
                f'@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}'
            )

    # Uploaded attachments
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    ALLOWED_UPLOAD_EXTENSIONS: List[str] = ["jpeg", "jpg", "png", "mp3", "wav"]
    AUDIO_EXTENSIONS: List[str] = [".mp3", ".wav"]

    # Composition transactions
    TRANSACTION_MAX_WAIT_SECONDS: float = 10
    TRANSACTION_TIMEOUT_SECONDS: float = 20
    ORDER_ALLOCATION_MAX_RETRIES: int = 3

    # Cache
    CACHE_ENABLED: bool = True
    CACHE_TTL: int = 300
    REDIS_URL: Optional[str] = None

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
