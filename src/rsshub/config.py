#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for application configuration: environment
variables, .env file, defaults and validation.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, List
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    port: int = 3000
    host: str = "0.0.0.0"
    public_feed_url: str = "https://your-domain.com/rss"


@dataclass
class FeedConfig:
    """Feed fetching and aggregation settings."""
    timeout: float = 10
    user_agent: str = BROWSER_USER_AGENT
    max_concurrent_feeds: int = 10
    max_items: int = 100
    description_max_length: int = 500


@dataclass
class CacheConfig:
    """Combined feed cache and refresh schedule."""
    cache_duration_minutes: int = 15
    refresh_interval_minutes: int = 15
    refresh_on_startup: bool = True
    enable_scheduler: bool = True

    @property
    def cache_duration_seconds(self) -> int:
        return self.cache_duration_minutes * 60

    @property
    def refresh_interval_seconds(self) -> int:
        return self.refresh_interval_minutes * 60


@dataclass
class Config:
    """Master configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    feeds: FeedConfig = field(default_factory=FeedConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    # Logging
    log_level: str = "INFO"
    verbose_logging: bool = False


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class ConfigManager:
    """Manages application configuration with validation and environment loading."""

    def __init__(self, env_file_path: str = ".env"):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to .env file relative to project root
        """
        self._config: Optional[Config] = None
        self._env_file_path = env_file_path
        self._load_environment()

    def _load_environment(self) -> None:
        """Load variables from .env without overriding the real environment."""
        project_root = Path(__file__).resolve().parents[2]
        env_path = project_root / self._env_file_path

        if env_path.exists():
            load_dotenv(dotenv_path=env_path, override=False)
            logger.info(f"Loaded environment from {env_path}")
        else:
            logger.debug(f"No .env file found at {env_path}")

    def get_config(self, force_reload: bool = False) -> Config:
        """
        Get application configuration.

        Args:
            force_reload: Force reloading configuration from environment

        Returns:
            Complete configuration object
        """
        if self._config is None or force_reload:
            self._config = self._build_config()
        return self._config

    def _build_config(self) -> Config:
        """Build configuration from environment variables."""
        try:
            server_config = ServerConfig(
                port=int(os.getenv('PORT', '3000')),
                host=os.getenv('HOST', '0.0.0.0'),
                public_feed_url=os.getenv('PUBLIC_FEED_URL', 'https://your-domain.com/rss')
            )

            feed_config = FeedConfig(
                timeout=float(os.getenv('FEED_TIMEOUT', '10')),
                user_agent=os.getenv('FEED_USER_AGENT', BROWSER_USER_AGENT),
                max_concurrent_feeds=int(os.getenv('MAX_CONCURRENT_FEEDS', '10')),
                max_items=int(os.getenv('MAX_FEED_ITEMS', '100')),
                description_max_length=int(os.getenv('DESCRIPTION_MAX_LENGTH', '500'))
            )

            cache_config = CacheConfig(
                cache_duration_minutes=int(os.getenv('CACHE_DURATION_MINUTES', '15')),
                refresh_interval_minutes=int(os.getenv('REFRESH_INTERVAL_MINUTES', '15')),
                refresh_on_startup=_env_bool('REFRESH_ON_STARTUP', True),
                enable_scheduler=_env_bool('ENABLE_SCHEDULER', True)
            )
        except ValueError as e:
            raise ConfigurationError([f"Invalid numeric setting: {e}"]) from e

        config = Config(
            server=server_config,
            feeds=feed_config,
            cache=cache_config,
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            verbose_logging=_env_bool('VERBOSE_LOGGING', False)
        )

        validate_config(config)
        return config

    def update_logging(self) -> None:
        """Configure logging based on current configuration."""
        configure_logging(self.get_config())


def validate_config(config: Config) -> None:
    """
    Validate configuration values.

    Raises:
        ConfigurationError: Listing every invalid setting
    """
    errors: List[str] = []

    if not 0 < config.server.port < 65536:
        errors.append("PORT must be between 1 and 65535")

    if config.feeds.timeout <= 0:
        errors.append("FEED_TIMEOUT must be positive")

    if config.feeds.max_concurrent_feeds < 1:
        errors.append("MAX_CONCURRENT_FEEDS must be at least 1")

    if config.feeds.max_items < 1:
        errors.append("MAX_FEED_ITEMS must be at least 1")

    if config.feeds.description_max_length < 1:
        errors.append("DESCRIPTION_MAX_LENGTH must be at least 1")

    if config.cache.cache_duration_minutes < 1:
        errors.append("CACHE_DURATION_MINUTES must be at least 1")

    if config.cache.refresh_interval_minutes < 1:
        errors.append("REFRESH_INTERVAL_MINUTES must be at least 1")

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config.log_level not in valid_log_levels:
        errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

    if errors:
        raise ConfigurationError(errors)

    logger.debug("Configuration validation passed")


def configure_logging(config: Config) -> None:
    """Apply log level and format from configuration to the root logger."""
    numeric_level = getattr(logging, config.log_level)
    root = logging.getLogger()
    root.setLevel(numeric_level)

    if config.verbose_logging:
        format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
    else:
        format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    formatter = logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S')
    for handler in root.handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> Config:
    """Get application configuration."""
    return get_config_manager().get_config()


def reset_config() -> None:
    """Reset configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None
