"""
Core settings and environment variables for Makola Issue Hub.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """
    
    # Application
    APP_NAME: str = "Makola Issue Hub"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # CORS - Frontend URLs allowed to access this API (comma separated)
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"
    
    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON
    
    # Mock DB mode for local development without Firebase credentials.
    # An empty MOCK_DB_PATH keeps the mock purely in memory.
    USE_MOCK_DB: bool = False
    MOCK_DB_PATH: str = "./mock_db.json"
    
    # Service area (geofence)
    # - SERVICE_AREA_CONFIG_PATH: optional JSON file replacing the built-in Makola boundary
    SERVICE_AREA_CONFIG_PATH: Optional[str] = None
    
    # Issue submission
    MAX_ISSUE_PHOTOS: int = 4
    DISPLAY_TIMEZONE: str = "Asia/Colombo"
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
