"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments,
plus the map engine settings shared by the service and the client engine.
"""

import os


class Config:
    """Base configuration class with common settings."""

    # Database configuration
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/zone_map.db'

    # Map engine
    MAP_API_URL = os.environ.get('MAP_API_URL') or 'http://localhost:5000'
    MAP_LOCK_WINDOW_MS = int(os.environ.get('MAP_LOCK_WINDOW_MS', 500))
    MAP_COMMIT_TIMEOUT_S = float(os.environ.get('MAP_COMMIT_TIMEOUT_S', 10))
    MAP_THROTTLE_MS = int(os.environ.get('MAP_THROTTLE_MS', 16))
    MAP_RESIZE_DEBOUNCE_MS = int(os.environ.get('MAP_RESIZE_DEBOUNCE_MS', 300))
    MAP_MOBILE_BREAKPOINT = int(os.environ.get('MAP_MOBILE_BREAKPOINT', 768))

    # Application settings
    APP_NAME = 'ZoneMap'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_PATH = os.environ.get('DATABASE_PATH', ':memory:')
    MAP_API_URL = 'http://testserver'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
