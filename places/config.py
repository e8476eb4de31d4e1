"""
Configuration management for Places
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Places"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    CORS_ORIGINS: list[str] = ["*"]

    # Database
    DATABASE_URL: str = "sqlite:///./restaurants.db"

    # Restaurants
    RESTAURANT_LIST_LIMIT: int = 10000  # effectively "all" for a personal list
    DEFAULT_TAG_COLOR: str = "#6B7280"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
