# /multitarget/config.py
from __future__ import annotations

import os

from pydantic import BaseModel


class Settings(BaseModel):
    API_KEY: str | None = os.getenv("API_KEY")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Expansion limits
    MAX_TARGETS: int = int(os.getenv("MAX_TARGETS", "4096"))  # inline /expand budget
    MAX_JOB_TARGETS: int = int(os.getenv("MAX_JOB_TARGETS", "1048576"))  # background job budget
    MAX_EXPRESSIONS: int = int(os.getenv("MAX_EXPRESSIONS", "256"))

    # Celery / Redis
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    RESULT_TTL_SECONDS: int = int(os.getenv("RESULT_TTL_SECONDS", "86400"))


settings = Settings()
