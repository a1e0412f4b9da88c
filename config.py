import os

from dotenv import load_dotenv

load_dotenv()


def _optional_int(value):
    """Parse an optional integer setting; empty or missing means unset"""
    if value is None or value.strip() == "":
        return None
    return int(value)


class Config:
    """Base configuration class"""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    DEBUG = os.getenv("DEBUG", "True") == "True"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Comma-separated list of origins allowed to call /api/*
    ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")

    # LLM provider selection ("gemini", "openai", "mistral").
    # API keys are read from the environment on each request, not cached here.
    LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini").lower()
    LLM_MODEL = os.getenv("LLM_MODEL")  # None -> provider default
    LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "30"))
    LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))
    LLM_RETRY_BACKOFF = float(os.getenv("LLM_RETRY_BACKOFF", "1.0"))

    # Prompt asks for up to two idioms; None keeps whatever the model returned
    MAX_IDIOMS = _optional_int(os.getenv("MAX_IDIOMS"))


class DevelopmentConfig(Config):
    """Development environment configuration"""

    DEBUG = True


class ProductionConfig(Config):
    """Production environment configuration"""

    DEBUG = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")


class TestingConfig(Config):
    """Testing environment configuration"""

    TESTING = True
    DEBUG = True
    LLM_PROVIDER = "gemini"
    LLM_MODEL = None
    LLM_MAX_RETRIES = 0
    LLM_RETRY_BACKOFF = 0.0
    MAX_IDIOMS = None


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
