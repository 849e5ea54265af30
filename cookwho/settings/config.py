import os
from pydantic_settings import BaseSettings
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    """Configuration settings for the application."""
    PROJECT_NAME: str = "CookWho API"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # "mongo" in production, "memory" for local runs and tests
    DOCUMENT_STORE: str = os.getenv("DOCUMENT_STORE", "mongo")
    MONGO_URI: Optional[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: Optional[str] = os.getenv("DB_NAME", "cookwho")

    SECRET_KEY: str = os.getenv("SECRET_KEY", "MySecretKey@123")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    BASKET_STORAGE_KEY: str = "basket"
    BASKET_BACKEND: str = os.getenv("BASKET_BACKEND", "memory")
    BASKET_FILE_DIR: str = os.getenv("BASKET_FILE_DIR", ".baskets")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    STRIPE_SECRET_KEY: Optional[str] = os.getenv("STRIPE_SECRET_KEY")
    CHECKOUT_CURRENCY: str = "gbp"

    GEOCODE_BASE_URL: str = "https://api.postcodes.io/postcodes"
    GEOCODE_TIMEOUT_SECONDS: float = 10.0
    CATEGORY_LOOKUP_CONCURRENCY: int = 8

    SMTP_HOST: str = os.getenv("SMTP_HOST", "smtp.mailgun.org")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER: Optional[str] = os.getenv("SMTP_USER")
    SMTP_PASSWORD: Optional[str] = os.getenv("SMTP_PASSWORD")
    FROM_EMAIL: str = os.getenv("FROM_EMAIL", "CookWho Alerts <alerts@cookwho.app>")

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
