"""
Environment-aware configuration.
Secrets and service credentials are read once here; the app factory hands
them to the storage layer and the media uploader.
"""
import os
import tempfile
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///auth-api.db")
    SQL_ECHO = _env_flag("SQL_ECHO")

    # Access and refresh tokens are signed with different secrets
    ACCESS_JWT_SECRET = os.getenv("ACCESS_JWT_SECRET", "dev-access-secret-change-me")
    REFRESH_JWT_SECRET = os.getenv("REFRESH_JWT_SECRET", "dev-refresh-secret-change-me")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", str(6 * 60 * 60))))
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("REFRESH_TOKEN_EXPIRES_SECONDS", str(7 * 24 * 60 * 60))))

    REFRESH_COOKIE_NAME = "refreshToken"
    REFRESH_COOKIE_SECURE = _env_flag("REFRESH_COOKIE_SECURE")

    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(tempfile.gettempdir(), "auth-api-uploads"))
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    SQL_ECHO = False
    ACCESS_JWT_SECRET = "test-access-secret"
    REFRESH_JWT_SECRET = "test-refresh-secret"
    CLOUDINARY_CLOUD_NAME = "test-cloud"
    CLOUDINARY_API_KEY = "test-key"
    CLOUDINARY_API_SECRET = "test-secret"


class ProductionConfig(BaseConfig):
    DEBUG = False
    REFRESH_COOKIE_SECURE = _env_flag("REFRESH_COOKIE_SECURE", "true")


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
