#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for all application configuration,
including provider credentials, record store selection, defaults, and validation.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict
from pathlib import Path

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_OPENROUTER_MODEL = "qwen/qwen-2.5-72b-instruct"
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

VALID_RECORD_STORES = ('memory', 'supabase', 'postgres')


@dataclass
class ProviderConfig:
    """Third-party discovery and inference credentials. All optional."""
    apify_api_key: Optional[str] = None
    serper_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = DEFAULT_OPENROUTER_MODEL
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    openrouter_referer: str = "https://viralv1.com"
    openrouter_title: str = "ViralV1 Content Analysis"


@dataclass
class DatabaseConfig:
    """Record store configuration."""
    backend: str = "memory"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_db_password: Optional[str] = None
    connection_timeout: int = 30


@dataclass
class ApplicationConfig:
    """Core application configuration."""
    # Provider call settings
    request_timeout: int = 60
    llm_max_tokens: int = 1000
    llm_temperature: float = 0.3

    # Pipeline settings
    max_workers: int = 1
    recent_searches_limit: int = 20

    # Logging
    log_level: str = "INFO"
    verbose_logging: bool = False


@dataclass
class Config:
    """Master configuration container."""
    providers: ProviderConfig = field(default_factory=ProviderConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    app: ApplicationConfig = field(default_factory=ApplicationConfig)

    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() in ['prod', 'production']

    def has_apify(self) -> bool:
        """Check if the Instagram hashtag scraper is available."""
        return bool(self.providers.apify_api_key)

    def has_serper(self) -> bool:
        """Check if web/image search is available."""
        return bool(self.providers.serper_api_key)

    def has_openrouter(self) -> bool:
        """Check if AI analysis is available."""
        return bool(self.providers.openrouter_api_key)

    def integration_status(self) -> Dict[str, bool]:
        """Which third-party providers have credentials."""
        return {
            'apify': self.has_apify(),
            'serper': self.has_serper(),
            'openrouter': self.has_openrouter(),
            'supabase': bool(self.database.supabase_url and self.database.supabase_key),
        }


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
        """Load environment variables from .env file."""
        # src/viralfinder/core -> project root
        project_root = Path(__file__).resolve().parents[3]
        env_path = project_root / self._env_file_path

        if env_path.exists():
            self._load_env_file(env_path)
        else:
            logger.debug(f"No .env file found at {env_path}")

    def _load_env_file(self, env_path: Path) -> None:
        """Load variables from .env file."""
        try:
            with open(env_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()

            loaded_count = 0
            for line_num, line in enumerate(lines, 1):
                line = line.strip()

                if not line or line.startswith('#'):
                    continue

                if '=' not in line:
                    logger.warning(f"Invalid .env format at line {line_num}: {line}")
                    continue

                key, value = line.split('=', 1)
                key = key.strip()
                value = value.strip()

                if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                    value = value[1:-1]

                # Environment wins over .env
                if key not in os.environ:
                    os.environ[key] = value
                    loaded_count += 1

            logger.info(f"Loaded {loaded_count} variables from {env_path}")

        except OSError as e:
            logger.error(f"Error loading .env file {env_path}: {e}")

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
        provider_config = ProviderConfig(
            apify_api_key=os.getenv('APIFY_API_KEY') or None,
            serper_api_key=os.getenv('SERPER_API_KEY') or None,
            openrouter_api_key=os.getenv('OPENROUTER_API_KEY') or None,
            openrouter_model=os.getenv('OPENROUTER_MODEL', DEFAULT_OPENROUTER_MODEL),
            openrouter_base_url=os.getenv('OPENROUTER_BASE_URL', DEFAULT_OPENROUTER_BASE_URL),
            openrouter_referer=os.getenv('OPENROUTER_REFERER', 'https://viralv1.com'),
            openrouter_title=os.getenv('OPENROUTER_TITLE', 'ViralV1 Content Analysis'),
        )

        database_config = DatabaseConfig(
            backend=os.getenv('RECORD_STORE', 'memory').lower(),
            supabase_url=os.getenv('SUPABASE_URL') or None,
            supabase_key=os.getenv('SUPABASE_SERVICE_KEY') or os.getenv('SUPABASE_ANON_KEY') or None,
            supabase_db_password=os.getenv('SUPABASE_DB_PASSWORD') or None,
            connection_timeout=self._get_int('DB_CONNECTION_TIMEOUT', 30),
        )

        app_config = ApplicationConfig(
            request_timeout=self._get_int('REQUEST_TIMEOUT', 60),
            llm_max_tokens=self._get_int('LLM_MAX_TOKENS', 1000),
            llm_temperature=self._get_float('LLM_TEMPERATURE', 0.3),
            max_workers=self._get_int('MAX_WORKERS', 1),
            recent_searches_limit=self._get_int('RECENT_SEARCHES_LIMIT', 20),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            verbose_logging=os.getenv('VERBOSE_LOGGING', 'false').lower() == 'true',
        )

        config = Config(
            providers=provider_config,
            database=database_config,
            app=app_config,
        )

        validate_config(config)
        return config

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        raw = os.getenv(key)
        if raw is None or raw == '':
            return default
        try:
            return int(raw)
        except ValueError:
            raise ConfigurationError(key, f"expected an integer, got {raw!r}")

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        raw = os.getenv(key)
        if raw is None or raw == '':
            return default
        try:
            return float(raw)
        except ValueError:
            raise ConfigurationError(key, f"expected a number, got {raw!r}")

    def update_logging(self) -> None:
        """Configure logging based on current configuration."""
        config = self.get_config()

        numeric_level = getattr(logging, config.app.log_level)
        logging.getLogger().setLevel(numeric_level)

        if config.app.verbose_logging:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        else:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        for handler in logging.getLogger().handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S'))


def validate_config(config: Config) -> None:
    """Validate configuration values, reporting every problem at once."""
    errors = []

    if config.database.backend not in VALID_RECORD_STORES:
        errors.append(f"RECORD_STORE must be one of: {', '.join(VALID_RECORD_STORES)}")

    if config.database.backend == 'supabase':
        if not config.database.supabase_url:
            errors.append("SUPABASE_URL is required for the supabase record store")
        if not config.database.supabase_key:
            errors.append("SUPABASE_SERVICE_KEY or SUPABASE_ANON_KEY is required for the supabase record store")

    if config.database.backend == 'postgres':
        if not config.database.supabase_url or not config.database.supabase_url.startswith('https://'):
            errors.append("SUPABASE_URL must start with https:// for the postgres record store")
        if not config.database.supabase_db_password:
            errors.append("SUPABASE_DB_PASSWORD is required for the postgres record store")

    if config.app.request_timeout < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    if config.app.max_workers < 1 or config.app.max_workers > 16:
        errors.append("MAX_WORKERS must be between 1 and 16")

    if config.app.recent_searches_limit < 1:
        errors.append("RECENT_SEARCHES_LIMIT must be at least 1")

    if not 0.0 <= config.app.llm_temperature <= 2.0:
        errors.append("LLM_TEMPERATURE must be between 0 and 2")

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config.app.log_level not in valid_log_levels:
        errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

    if errors:
        raise ConfigurationError('environment', '; '.join(errors))

    logger.debug("Configuration validation passed")


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
