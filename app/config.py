import os

class BaseConfig:
    JSON_SORT_KEYS = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    RATELIMIT_ENABLED = True
    LOGIN_LIMIT_PER_IP = os.getenv("LOGIN_LIMIT_PER_IP", "10 per 30 minutes")
    ADMIN_LOGIN_LIMIT_PER_IP = os.getenv("ADMIN_LOGIN_LIMIT_PER_IP", "5 per 15 minutes")
    REGISTER_LIMIT_PER_IP = os.getenv("REGISTER_LIMIT_PER_IP", "20 per hour")
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-insecure-jwt-key")
    ACCESS_TOKEN_LIFETIME_MIN = int(os.getenv("ACCESS_TOKEN_LIFETIME_MIN", 15))
    REFRESH_TOKEN_LIFETIME_DAYS = int(os.getenv("REFRESH_TOKEN_LIFETIME_DAYS", 30))
    # The single admin account that resolves to MAIN_ADMIN
    OWNER_ADMIN_EMAIL = os.getenv("OWNER_ADMIN_EMAIL", "owner@storefront.local")
    STATUS_SWEEP_INTERVAL_MIN = int(os.getenv("STATUS_SWEEP_INTERVAL_MIN", 60))
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "storefront-identity")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dev.db")

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
    OWNER_ADMIN_EMAIL = "owner@storefront.test"
    RATELIMIT_ENABLED = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")

class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    JWT_SECRET = os.getenv("JWT_SECRET")
    OWNER_ADMIN_EMAIL = os.getenv("OWNER_ADMIN_EMAIL")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")

    @staticmethod
    def validate():
        missing = []
        for key in ("SECRET_KEY", "DATABASE_URL", "JWT_SECRET", "OWNER_ADMIN_EMAIL"):
            if not os.getenv(key):
                missing.append(key)
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )

def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
