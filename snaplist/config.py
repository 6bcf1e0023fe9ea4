import os
from dotenv import load_dotenv

load_dotenv()


def _require_env(key: str) -> str:
    value = os.getenv(key)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {key}")
    return value


def _env_flag(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Checked by create_app() for every config except TestingConfig
    REQUIRED_ENV = ("SECRET_KEY", "DATABASE_URL")

    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    APP_URL = os.getenv("APP_URL", "https://snaplist.com")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", 24))

    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_TTL = int(os.getenv("REDIS_TTL", 3600))

    # Email (AWS SES SMTP interface)
    AWS_REGION = os.getenv("AWS_REGION", "ca-central-1")
    AWS_SES_SMTP_USERNAME = os.getenv("AWS_SES_SMTP_USERNAME")
    AWS_SES_SMTP_PASSWORD = os.getenv("AWS_SES_SMTP_PASSWORD")
    EMAIL_SMTP_HOST = os.getenv("EMAIL_SMTP_HOST")
    EMAIL_SMTP_PORT = int(os.getenv("EMAIL_SMTP_PORT", 587))
    EMAIL_FROM = os.getenv("EMAIL_FROM", "noreply@snaplist.com")
    EMAIL_REPLY_TO = os.getenv("EMAIL_REPLY_TO", "support@snaplist.com")
    EMAIL_TIMEOUT = int(os.getenv("EMAIL_TIMEOUT", 10))

    # Billing price ids per tier
    STRIPE_STANDARD_PRICE_ID = os.getenv("STRIPE_STANDARD_PRICE_ID")
    STRIPE_PRO_PRICE_ID = os.getenv("STRIPE_PRO_PRICE_ID")

    SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", True)
    GEOIP_LOOKUP = _env_flag("GEOIP_LOOKUP", True)


class TestingConfig(Config):
    REQUIRED_ENV = ()

    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    APP_URL = "http://localhost:5000"
    REDIS_URL = None
    REDIS_TTL = 3600
    SEED_ON_STARTUP = False
    GEOIP_LOOKUP = False
    AWS_REGION = "ca-central-1"
    EMAIL_SMTP_HOST = None
    EMAIL_SMTP_PORT = 587
    EMAIL_TIMEOUT = 10
    EMAIL_FROM = "noreply@snaplist.com"
    EMAIL_REPLY_TO = "support@snaplist.com"
    AWS_SES_SMTP_USERNAME = "smtp-user"
    AWS_SES_SMTP_PASSWORD = "smtp-pass"
    STRIPE_STANDARD_PRICE_ID = "price_standard_test"
    STRIPE_PRO_PRICE_ID = "price_pro_test"


def check_required(config) -> None:
    for key in getattr(config, "REQUIRED_ENV", ()):
        attr = "SQLALCHEMY_DATABASE_URI" if key == "DATABASE_URL" else key
        if not config.get(attr):
            _require_env(key)
