"""
Application configuration settings with validation.
Loads from environment variables with type checking.
"""

from pydantic import validator
from pydantic_settings import BaseSettings
from typing import Optional, List
import base64

class Settings(BaseSettings):
    # Application Metadata
    PROJECT_TITLE: str = "Apartment Friends API"
    PROJECT_DESCRIPTION: str = "Backend API for sharing rental listings within a friend network"
    PROJECT_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    PORT: Optional[int] = None
    ENVIRONMENT: str = "development"  # or 'testing', 'production'
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str
    DATABASE_ECHO: bool = False
    FRONTEND_URL: str = "http://localhost:5173"

    # Authentication (tokens are issued by the identity provider)
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Google Cloud Storage Settings
    GCS_PROJECT_ID: Optional[str] = None
    GCS_BUCKET_NAME: str
    GCS_CREDENTIALS_JSON_B64: Optional[str] = None
    GCS_BASE_URL: str = "https://storage.googleapis.com"
    GCS_LISTING_IMAGE_BASE_PATH: str = "listings/{user_id}"
    MAX_LISTING_IMAGE_SIZE: int = 5 * 1024 * 1024  # 5MB
    MAX_IMAGES_PER_UPLOAD: int = 10

    @property
    def GCS_PUBLIC_BASE_URL(self):
        return f"{self.GCS_BASE_URL}/{self.GCS_BUCKET_NAME}"

    # Friend network
    MAX_NETWORK_DEGREE: int = 6
    DEFAULT_NETWORK_DEGREE: int = 3
    NETWORK_MAX_REACHABLE: int = 5000

    # Rate limiting (slowapi limit strings)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_DEFAULT: str = "100/15 minutes"
    RATE_LIMIT_FRIEND_REQUESTS: str = "20/hour"
    RATE_LIMIT_LISTING_CREATE: str = "5/hour"
    RATE_LIMIT_UPLOADS: str = "10/15 minutes"

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 50

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    @validator("MAX_LISTING_IMAGE_SIZE")
    def validate_max_image_size(cls, v):
        if v > 10 * 1024 * 1024:  # 10MB max
            raise ValueError("MAX_LISTING_IMAGE_SIZE cannot exceed 10MB")
        return v

    @validator("MAX_NETWORK_DEGREE")
    def validate_max_degree(cls, v):
        if not 1 <= v <= 6:
            raise ValueError("MAX_NETWORK_DEGREE must be between 1 and 6")
        return v

    @validator("DEFAULT_NETWORK_DEGREE")
    def validate_default_degree(cls, v, values):
        max_degree = values.get("MAX_NETWORK_DEGREE", 6)
        if not 1 <= v <= max_degree:
            raise ValueError(f"DEFAULT_NETWORK_DEGREE must be between 1 and {max_degree}")
        return v

    @property
    def GCS_CREDENTIALS_JSON(self) -> Optional[str]:
        """Decode base64 encoded credentials if available"""
        if self.GCS_CREDENTIALS_JSON_B64:
            try:
                return base64.b64decode(self.GCS_CREDENTIALS_JSON_B64).decode('utf-8')
            except Exception as e:
                raise ValueError(f"Failed to decode GCS credentials: {str(e)}")
        return None

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


settings = Settings()
