"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    TESTING = _env_flag("TESTING")
    DEBUG = _env_flag("DEBUG")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Auth (tokens are issued by the portal's auth service)
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "dev_secret")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "")

    # Storage: "memory" keeps everything in-process, "prisma" uses PostgreSQL
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    EMPLOYEE_DIRECTORY_FILE = os.getenv(
        "EMPLOYEE_DIRECTORY_FILE",
        os.path.join(os.path.dirname(__file__), "..", "..", "data", "employees.json"),
    )

    # Realtime: "local" fans out to sockets of this process only,
    # "redis" bridges channels across processes through Redis pub/sub
    REALTIME_BACKEND = os.getenv("REALTIME_BACKEND", "local").lower()
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")

    # Messaging
    MESSAGE_RATE_LIMIT_COUNT = int(os.getenv("MESSAGE_RATE_LIMIT_COUNT", "30"))
    MESSAGE_RATE_LIMIT_WINDOW_SECONDS = float(
        os.getenv("MESSAGE_RATE_LIMIT_WINDOW_SECONDS", "60")
    )
    MESSAGE_MAX_LENGTH = int(os.getenv("MESSAGE_MAX_LENGTH", "5000"))

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    STORAGE_BACKEND = "memory"
    REALTIME_BACKEND = "local"


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
