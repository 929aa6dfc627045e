"""
Production environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig


@dataclass
class ProductionConfig(AppConfig):
    """Production environment configuration"""

    def __post_init__(self):

        # Production-specific overrides
        self.environment = "production"
        self.debug = False

        # Production logging - less verbose, focus on errors
        self.logging.level = "INFO"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/prod-app.log"

        # Production UI - clean and professional
        self.ui.app_title = "⚽ PlayScore"
        self.ui.show_breadcrumbs = False

        # Production session settings
        self.auth.identity_provider = "cloud"
        self.auth.default_ttl_seconds = 3600
        self.api.timeout_seconds = 15.0


def get_production_config() -> ProductionConfig:
    """Get production-specific configuration"""
    return ProductionConfig()
