from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./stockroom.db"
    STORE_BACKEND: str = "sql"  # "sql" or "memory"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    SEED_DEMO_DATA: bool = True
    LOW_STOCK_CHECK_SECONDS: int = 300  # 0 disables the job
    STOCK_LOCK_DIR: Optional[str] = None
    STOCK_LOCK_TIMEOUT_SECONDS: float = 10
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
