"""Environment-driven settings for the taskdesk API."""

import os
from pathlib import Path

DB_PATH = Path(__file__).parent / "data.db"
DATABASE_URL = os.getenv("TASKDESK_DATABASE_URL", f"sqlite:///{DB_PATH}")

# Tokens are issued by the identity provider; we only verify them.
JWT_SECRET = os.getenv("TASKDESK_JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = os.getenv("TASKDESK_JWT_ALGORITHM", "HS256")

DEFAULT_PAGE_SIZE = int(os.getenv("TASKDESK_DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("TASKDESK_MAX_PAGE_SIZE", "100"))

ALLOWED_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
