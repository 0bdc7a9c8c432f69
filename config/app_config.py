"""Application configuration"""

import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

# Load .env from the project root if present
project_root = Path(__file__).parent.parent
env_path = project_root / '.env'
if env_path.exists():
    load_dotenv(env_path)


class AppConfig:
    """Runtime settings for the annotation service"""

    # development | production; only development exposes raw error messages
    ENV: str = os.getenv("APP_ENV", "production").lower()

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Legacy flat export consulted by /check when the primary store misses
    CSV_FILE_PATH: str = os.getenv(
        "CSV_FILE_PATH", str(project_root / "annotations_export.csv")
    )

    LABELS_FILE: str = os.getenv(
        "LABELS_FILE", str(project_root / "config" / "labels.json")
    )

    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
        ).split(",")
        if origin.strip()
    ]

    @classmethod
    def is_development(cls) -> bool:
        """Whether detailed error messages may be returned to clients"""
        return cls.ENV == "development"
