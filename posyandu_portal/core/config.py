from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    # App Settings
    APP_NAME: str = "Posyandu Portal"
    PROJECT_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: str = "*"  # Comma-separated string or "*"

    # Posyandu REST backend
    BACKEND_URL: str = "http://localhost:8000/api"
    BACKEND_TOKEN: str | None = None  # Bearer token of the portal's account
    BACKEND_TIMEOUT: float = Field(default=10.0, gt=0)

    # Data cache (seconds)
    CACHE_DEFAULT_TTL: float = Field(default=60, gt=0)
    CACHE_MAX_ENTRIES: int = Field(default=0, ge=0)  # 0 = unbounded
    CACHE_SWEEP_INTERVAL: float = Field(default=300, ge=0)  # 0 disables
    CONSULTATION_TTL: float = Field(default=15, gt=0)
    ACTIVITY_LOG_TTL: float = Field(default=30, gt=0)
    REFERENCE_TTL: float = Field(default=300, gt=0)

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Parse ALLOWED_ORIGINS
    @property
    def allowed_origins_list(self) -> List[str]:
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


settings = Settings()
