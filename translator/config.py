"""Application configuration, read from the environment.

Every knob has a default except TEXT_HASH_SALT, which must be set for the
translate endpoint to accept requests.
"""

import os


def env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to default."""
    raw = os.getenv(name)
    try:
        value = int(raw) if raw else 0
    except ValueError:
        return default
    return value if value > 0 else default


class Config:
    """Base configuration shared by every environment."""

    def __init__(self):
        self.SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///translator.db')
        self.SQLALCHEMY_TRACK_MODIFICATIONS = False
        self.JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-secret')
        self.JWT_ACCESS_TOKEN_EXPIRES = env_int('JWT_ACCESS_TOKEN_EXPIRES', 86400)
        self.SESSION_COOKIE_SECURE = False
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

        # Per-user and per-IP fixed windows for POST /api/translate
        self.RATE_LIMIT_WINDOW_MS = env_int('RATE_LIMIT_WINDOW_MS', 60_000)
        self.RATE_LIMIT_REQUESTS = env_int('RATE_LIMIT_REQUESTS', 20)
        self.RATE_LIMIT_IP_WINDOW_MS = env_int('RATE_LIMIT_IP_WINDOW_MS', 60_000)
        self.RATE_LIMIT_IP_REQUESTS = env_int('RATE_LIMIT_IP_REQUESTS', 60)

        self.TRANSLATION_CACHE_TTL_MS = env_int('TRANSLATION_CACHE_TTL_MS', 5 * 60_000)
        self.TRANSLATION_CACHE_MAX_ENTRIES = env_int('TRANSLATION_CACHE_MAX_ENTRIES', 500)
        self.PROVIDER_TIMEOUT_MS = env_int('PROVIDER_TIMEOUT_MS', 10_000)
        self.MAX_TRANSLATION_CHARS = env_int('MAX_TRANSLATION_CHARS', 2000)
        self.TEXT_HASH_SALT = os.getenv('TEXT_HASH_SALT', '')

        self.TRANSLATION_PROVIDER = os.getenv('TRANSLATION_PROVIDER', 'libretranslate')
        self.LIBRETRANSLATE_URL = os.getenv('LIBRETRANSLATE_URL', 'http://localhost:5000')
        self.LIBRETRANSLATE_API_KEY = os.getenv('LIBRETRANSLATE_API_KEY', '')

        # Sign-up / login throttling (Flask-Limiter)
        self.RATELIMIT_ENABLED = True


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True

    def __init__(self):
        super().__init__()
        self.SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
        self.RATELIMIT_ENABLED = False


class ProductionConfig(Config):

    def __init__(self):
        super().__init__()
        self.SESSION_COOKIE_SECURE = True


config_by_name = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
