from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""
    
    # Database
    DATABASE_URL: str
    
    # API
    API_TITLE: str = "Webnode API"
    API_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Security
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    
    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    
    # Search
    SEARCH_RESULT_LIMIT: int = 20
    
    # Bootstrap admin (POST /admin/setup)
    ADMIN_EMAIL: str = "admin@webnode.com"
    ADMIN_USERNAME: str = "admin"
    ADMIN_NAME: str = "Admin"
    ADMIN_PASSWORD: Optional[str] = None
    
    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()
