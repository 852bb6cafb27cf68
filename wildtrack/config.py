# wildtrack/config.py
from typing import List, Optional

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./wildtrack.db"
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: float = 60 * 24 * 7  # 7 days

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated list of allowed origins
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5000,http://127.0.0.1:5500"

    # Single administrator resolved from the environment (disabled when unset)
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD_HASH: Optional[str] = None
    ADMIN_ROLE: str = "admin"

    SEED_ADMIN_USERNAME: str = "admin"
    SEED_ADMIN_PASSWORD: str = "admin123"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"

settings = Settings()
