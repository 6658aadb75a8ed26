import os
from pydantic_settings import BaseSettings
from typing import List, Literal

class Settings(BaseSettings):
    """Application settings."""
    # Base settings
    DEBUG: bool = False
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    APP_VERSION: str = "1.0.0"

    # CORS settings
    CLIENT_URL: str = os.getenv("CLIENT_URL", "")
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Frontend development server
        "http://localhost:3005",
    ]

    # Backends: "sql" | "memory" and "firebase" | "memory"
    STORAGE_BACKEND: Literal["sql", "memory"] = os.getenv("STORAGE_BACKEND", "sql")
    IDENTITY_BACKEND: Literal["firebase", "memory"] = os.getenv("IDENTITY_BACKEND", "firebase")

    # Firebase settings
    FIREBASE_PROJECT_ID: str = ""
    # Explicit Firebase Admin SDK credentials JSON path
    FIREBASE_SERVICE_ACCOUNT_JSON: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "./firebase-service-account.json")
    # Web API key, needed for password sign-in through the Identity Toolkit REST API
    FIREBASE_WEB_API_KEY: str = os.getenv("FIREBASE_WEB_API_KEY", "")
    IDENTITY_TOOLKIT_URL: str = os.getenv("IDENTITY_TOOLKIT_URL", "https://identitytoolkit.googleapis.com/v1")

    # Database settings
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "postgres")
    DB_NAME: str = os.getenv("DB_NAME", "habit_tracker")
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )

    # Redis settings (rate limit storage)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "1000/hour")

    # Calendar day boundaries are computed in this timezone
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "UTC")

    # Share / stats configuration
    SHARE_TOP_HABITS: int = 5
    SHARE_ACTIVITY_DAYS: int = 30
    DASHBOARD_ACTIVITY_DAYS: int = 7

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()

# Defaults applied to newly created habits and profiles
DEFAULT_HABIT_EMOJI = "✅"
DEFAULT_HABIT_CATEGORY = "General"
DEFAULT_HABIT_COLOR = "#3B82F6"
DEFAULT_THEME = "light"
