import os


def normalize_database_url(raw_url: str) -> str:
    if raw_url.startswith("postgres://"):
        return raw_url.replace("postgres://", "postgresql://", 1)
    return raw_url


def _env_list(name, default):
    return [item.strip().lower() for item in os.getenv(name, default).split(",") if item.strip()]


def _env_flag(name, default="false"):
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-unsafe-key")
    SQLALCHEMY_DATABASE_URI = normalize_database_url(
        os.getenv("DATABASE_URL", "sqlite:///instance/iftar.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }
    CACHE_TYPE = os.getenv("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = int(os.getenv("CACHE_DEFAULT_TIMEOUT", "300"))
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "1000 per day;200 per hour")
    RATELIMIT_STRICT = os.getenv("RATELIMIT_STRICT", "10 per minute")

    MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_MB", "10")) * 1024 * 1024

    PLACES_LIST_LIMIT = int(os.getenv("PLACES_LIST_LIMIT", "200"))
    NEARBY_LIMIT = int(os.getenv("NEARBY_LIMIT", "20"))
    ALLOWED_IMAGE_HOSTS = _env_list("ALLOWED_IMAGE_HOSTS", "res.cloudinary.com")
    RESOLVE_LINK_HOSTS = _env_list("RESOLVE_LINK_HOSTS", "goo.gl,maps.app.goo.gl")
    RESOLVE_LINK_TIMEOUT = float(os.getenv("RESOLVE_LINK_TIMEOUT", "10"))

    FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
    FIREBASE_CLIENT_EMAIL = os.getenv("FIREBASE_CLIENT_EMAIL")
    FIREBASE_PRIVATE_KEY = (os.getenv("FIREBASE_PRIVATE_KEY") or "").replace("\\n", "\n") or None

    S3_API_ENDPOINT = os.getenv("S3_API_ENDPOINT")
    S3_ACCESS_KEY_ID = os.getenv("S3_ACCESS_KEY_ID")
    S3_SECRET_ACCESS_KEY = os.getenv("S3_SECRET_ACCESS_KEY")
    S3_BUCKET = os.getenv("S3_BUCKET")
    S3_PUBLIC_URL = os.getenv("S3_PUBLIC_URL")

    SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", "true")
    SEED_TIMEOUT_SECONDS = float(os.getenv("SEED_TIMEOUT_SECONDS", "10"))
    SENTRY_DSN = os.getenv("SENTRY_DSN")


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RATELIMIT_ENABLED = False
    CACHE_TYPE = "NullCache"
    SEED_ON_STARTUP = False
    ALLOWED_IMAGE_HOSTS = ["res.cloudinary.com"]
    S3_BUCKET = "test-bucket"
    S3_PUBLIC_URL = "https://cdn.example.test"


config_by_env = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
