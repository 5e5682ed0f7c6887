"""
Runtime settings for the catalog API.

Values are read from ``CATALOG_*`` environment variables when this
module is imported.  ``database_url`` selects the storage backend:
``memory`` keeps everything in process, anything else is taken as a
SQLite file path (an optional ``sqlite:///`` prefix is stripped).
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("CATALOG_PROJECT_NAME", "api-catalog")
    api_version: str = os.getenv("CATALOG_API_VERSION", "1.0.0")
    log_level: str = os.getenv("CATALOG_LOG_LEVEL", "INFO")
    log_file: str = os.getenv("CATALOG_LOG_FILE", "")
    database_url: str = os.getenv("CATALOG_DATABASE_URL", "memory")
    host: str = os.getenv("CATALOG_HOST", "127.0.0.1")
    port: int = int(os.getenv("CATALOG_PORT", "8085"))
    cors_origins: List[str] = field(
        default_factory=lambda: _split(os.getenv("CATALOG_CORS_ORIGINS", "*"))
    )


settings = Settings()
