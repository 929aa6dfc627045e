"""
Environment-specific configurations
"""

import os
from config.app_config import AppConfig


def get_environment_config() -> AppConfig:
    """
    Get configuration based on the current environment

    Environment is determined by APP_ENV environment variable:
    - 'development' -> DevelopmentConfig
    - 'production' -> ProductionConfig
    - anything else -> AppConfig.load() (base configuration)
    """

    env = os.getenv("APP_ENV", "development").lower()

    if env == "development":
        from .development import get_development_config
        config = get_development_config()
    elif env == "production":
        from .production import get_production_config
        config = get_production_config()
    else:
        return AppConfig.load()

    # Endpoints and session switches always come from secrets/environment;
    # the preset timeout applies unless API_TIMEOUT_SECONDS is set
    config.apply_deployment_settings()
    return config
