import os

# --------------------
# Configuration
# --------------------
# Development fallback; set DATABASE_URL in any real deployment.
DEFAULT_DATABASE_URL = "sqlite:///local_library.db"


class Config:
    SECRET_KEY = os.environ.get("LOCAL_LIBRARY_SECRET") or "change-this-secret-in-production"
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # number of rows shown per page in HTML lists
    PAGE_SIZE = int(os.environ.get("PAGE_SIZE", "10"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # None means "follow app.debug"
    SHOW_ERROR_DETAIL = None

    WTF_CSRF_ENABLED = True

    # Security headers (Talisman)
    FORCE_HTTPS = False
    CONTENT_SECURITY_POLICY = {
        'default-src': ["'self'"],
        'script-src': ["'self'", "https://cdn.jsdelivr.net"],
        'style-src': ["'self'", "https://cdn.jsdelivr.net", "'unsafe-inline'"],
        'img-src': ["'self'", "data:"],
    }


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    SHOW_ERROR_DETAIL = False
    PAGE_SIZE = 10
