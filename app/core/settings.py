"""
Core settings and environment variables for the Waste Watch reporting backend.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Dict, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Waste Watch"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - comma-separated list of frontend origins allowed to call the API
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"

    # Report store backend: "json" (default, file on disk) or "firestore"
    REPORT_STORE: str = "json"
    REPORTS_FILE: str = "./uploads/reports.json"

    # Uploaded photos are written here and served under /uploads
    UPLOAD_DIR: str = "./uploads"
    MAX_IMAGE_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Administrative bulk clear
    ADMIN_PASSWORD: str = "change-me"

    # Priority table overrides, e.g. PRIORITY_OVERRIDES='{"animal-adopt": "Low"}'
    PRIORITY_OVERRIDES: Dict[str, str] = {}

    # In-process status sweep (0 = disabled, rely on an external scheduler)
    SWEEP_INTERVAL_SECONDS: int = 0

    # Firebase/Firestore (only used when REPORT_STORE=firestore)
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origins_list(self) -> list:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
