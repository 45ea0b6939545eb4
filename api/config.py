"""
Environment-aware configuration.
Values come from the process environment, with `.env` loaded first when present.
"""
import os
from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///bookstore.db")
    SQLALCHEMY_ECHO = _env_flag("SQLALCHEMY_ECHO", "false")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CONFIGURE_LOGGING = True
    # Delay advertised in Retry-After when the store reports a deadlock
    RETRY_AFTER_SECONDS = int(os.getenv("RETRY_AFTER_SECONDS", "5"))
    SEED_REFERENCE_DATA = _env_flag("SEED_REFERENCE_DATA", "true")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    SQLALCHEMY_ECHO = False
    # pytest owns the root logger (caplog)
    CONFIGURE_LOGGING = False
    SEED_REFERENCE_DATA = True


class ProductionConfig(BaseConfig):
    DEBUG = False


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
