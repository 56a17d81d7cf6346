from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "mentor-admin-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Mentorship Console")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/mentor_admin_dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Review rules
    max_review_note_length: int = int(os.getenv("MAX_REVIEW_NOTE_LENGTH", "500"))
    default_max_score: int = int(os.getenv("DEFAULT_MAX_SCORE", "100"))
    review_queue_max_limit: int = int(os.getenv("REVIEW_QUEUE_MAX_LIMIT", "100"))

settings = Settings()
