"""
Unified Configuration System for the PlayScore client

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import streamlit as st
import os
from pathlib import Path


DEFAULT_API_BASE_URL = "http://10.0.2.2:3000/api"
DEFAULT_AUTH_API_URL = "http://localhost:3000/api/auth"
DEFAULT_APP_NAME = "playscore"


def _read_setting(key: str, default: str) -> str:
    """Read a setting from Streamlit secrets, then the environment"""
    # In test environment, prefer environment variables
    if os.getenv("PYTEST_CURRENT_TEST") is not None:
        return os.getenv(key, default)

    try:
        value = st.secrets.get(key)
    except Exception:
        # Secrets file missing or unreadable
        value = None

    if value:
        return str(value)
    return os.getenv(key, default)


@dataclass
class APIConfig:
    """Remote API configuration settings"""
    base_url: str = DEFAULT_API_BASE_URL
    auth_api_url: str = DEFAULT_AUTH_API_URL
    timeout_seconds: float = 10.0

    @classmethod
    def from_secrets(cls, default_timeout: float = 10.0) -> 'APIConfig':
        """Load API config from Streamlit secrets with environment fallback"""
        timeout = _read_setting("API_TIMEOUT_SECONDS", str(default_timeout))
        try:
            timeout_seconds = float(timeout)
        except ValueError:
            timeout_seconds = default_timeout

        return cls(
            base_url=_read_setting("API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            auth_api_url=_read_setting("AUTH_API_URL", DEFAULT_AUTH_API_URL).rstrip("/"),
            timeout_seconds=timeout_seconds,
        )


@dataclass
class AuthConfig:
    """Authentication and session configuration"""
    identity_provider: str = "cloud"  # cloud, noop
    default_ttl_seconds: int = 3600
    persist_session: bool = False
    secure_storage_dir: str = field(
        default_factory=lambda: str(Path.home() / f".{DEFAULT_APP_NAME}" / "secure")
    )


@dataclass
class NavigationConfig:
    """Navigation roots used by the startup policy"""
    unauthenticated_root: str = "login"
    authenticated_root: str = "home"


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "PlayScore"
    page_icon: str = "⚽"
    show_breadcrumbs: bool = False


@dataclass
class LoggingConfig:
    """Logging and monitoring configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = True
    log_file: str = "logs/app.log"


@dataclass
class AppConfig:
    """Main application configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    app_name: str = field(default_factory=lambda: os.getenv("APP_NAME", DEFAULT_APP_NAME))
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load configuration with environment overrides"""
        config = cls()
        config.apply_deployment_settings()

        # Apply environment-specific overrides
        if config.environment == "production":
            config.debug = False
            config.logging.level = "WARNING"
        elif config.environment == "development":
            config.debug = True
            config.logging.level = "DEBUG"

        return config

    def apply_deployment_settings(self):
        """Apply endpoints and session switches from secrets/environment"""
        self.api = APIConfig.from_secrets(default_timeout=self.api.timeout_seconds)

        provider = os.getenv("IDENTITY_PROVIDER")
        if provider:
            self.auth.identity_provider = provider.lower()

        if os.getenv("PERSIST_SESSION", "").lower() == "true":
            self.auth.persist_session = True

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if not self.api.base_url.startswith(("http://", "https://")):
            errors.append(f"API base URL must be http(s): {self.api.base_url}")

        if not self.api.auth_api_url.startswith(("http://", "https://")):
            errors.append(f"Auth API URL must be http(s): {self.api.auth_api_url}")

        if self.api.timeout_seconds <= 0:
            errors.append("API timeout must be positive")

        if self.auth.identity_provider not in ("cloud", "noop"):
            errors.append(f"Unknown identity provider: {self.auth.identity_provider}")

        if self.auth.default_ttl_seconds <= 0:
            errors.append("Default session TTL must be positive")

        if self.navigation.unauthenticated_root == self.navigation.authenticated_root:
            errors.append("Authenticated and unauthenticated roots must differ")

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Summarize non-secret settings for diagnostics"""
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "debug": self.debug,
            "api_base_url": self.api.base_url,
            "auth_api_url": self.api.auth_api_url,
            "identity_provider": self.auth.identity_provider,
            "persist_session": self.auth.persist_session,
        }


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        # Environment presets import this module
        from config.environments import get_environment_config
        _config = get_environment_config()

        # Validate configuration
        errors = _config.validate()
        if errors:
            import warnings
            for error in errors:
                warnings.warn(f"Configuration error: {error}")

    return _config


def reload_config() -> AppConfig:
    """Reload configuration (useful for testing)"""
    global _config
    _config = None
    return get_config()


def get_api_base_url() -> str:
    """Get the remote API base URL"""
    return get_config().api.base_url
