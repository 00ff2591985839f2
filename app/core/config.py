from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Optional, List, Union


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./fitclass.db"

    # Firebase (token verification only)
    firebase_project_id: Optional[str] = None
    firebase_credentials_path: Optional[str] = None

    # API
    project_name: str = "FitClass API"
    api_v1_str: str = "/api/v1"

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_webhook_tolerance: int = 300  # seconds
    stripe_api_version: Optional[str] = None
    checkout_success_url: str = "http://localhost:5000/subscription/success"
    checkout_cancel_url: str = "http://localhost:5000/subscription/cancel"

    # Boot
    seed_demo_data: bool = True

    # Environment
    environment: str = "development"
    debug: bool = False

    # CORS
    cors_origins: List[str] = ["http://localhost:5000"]

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS origins from environment variable (comma-separated) or use default list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
