#!/usr/bin/env python3
"""
Tests for environment-driven configuration.
"""

import logging

import pytest

from viralfinder.core.config import Config, ConfigManager, DatabaseConfig, validate_config
from viralfinder.core.exceptions import ConfigurationError


def test_defaults_need_no_credentials(clean_env):
    config = ConfigManager().get_config()

    assert config.database.backend == 'memory'
    assert config.app.max_workers == 1
    assert config.app.recent_searches_limit == 20
    assert not config.has_apify()
    assert not config.has_serper()
    assert not config.has_openrouter()
    assert not config.is_production()


def test_credentials_from_environment(clean_env):
    clean_env.setenv('APIFY_API_KEY', 'apify-token')
    clean_env.setenv('SERPER_API_KEY', 'serper-key')
    clean_env.setenv('OPENROUTER_API_KEY', 'or-key')
    clean_env.setenv('OPENROUTER_MODEL', 'some/model')
    clean_env.setenv('MAX_WORKERS', '4')

    config = ConfigManager().get_config()

    assert config.integration_status() == {
        'apify': True, 'serper': True, 'openrouter': True, 'supabase': False,
    }
    assert config.providers.openrouter_model == 'some/model'
    assert config.app.max_workers == 4


def test_empty_credential_counts_as_absent(clean_env):
    clean_env.setenv('SERPER_API_KEY', '')
    assert not ConfigManager().get_config().has_serper()


@pytest.mark.parametrize('name, value', [
    ('MAX_WORKERS', 'many'),
    ('MAX_WORKERS', '0'),
    ('MAX_WORKERS', '17'),
    ('REQUEST_TIMEOUT', '0'),
    ('LLM_TEMPERATURE', 'hot'),
    ('LOG_LEVEL', 'chatty'),
    ('RECORD_STORE', 'mongo'),
])
def test_invalid_values_raise(clean_env, name, value):
    clean_env.setenv(name, value)

    with pytest.raises(ConfigurationError):
        ConfigManager().get_config()


def test_supabase_backend_requires_credentials():
    config = Config(database=DatabaseConfig(backend='supabase'))

    with pytest.raises(ConfigurationError) as exc_info:
        validate_config(config)

    assert 'SUPABASE_URL' in exc_info.value.context['issue']


def test_production_flag(clean_env):
    clean_env.setenv('ENVIRONMENT', 'production')
    assert ConfigManager().get_config().is_production()


def test_config_is_cached_until_forced(clean_env):
    manager = ConfigManager()
    first = manager.get_config()

    clean_env.setenv('MAX_WORKERS', '3')

    assert manager.get_config() is first
    assert manager.get_config(force_reload=True).app.max_workers == 3


def test_update_logging_sets_root_level(clean_env):
    clean_env.setenv('LOG_LEVEL', 'WARNING')
    root = logging.getLogger()
    previous = root.level
    try:
        ConfigManager().update_logging()
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)
