#!/usr/bin/env python3
"""
Configuration loading: YAML file, .env file and environment overrides
"""

import os
import logging
from typing import Dict, Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str] = 'config.yaml') -> Dict[str, Any]:
    """Load configuration from YAML file with environment variable overrides."""
    load_dotenv()

    config = get_default_config()

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f) or {}
            config = merge_config(config, file_config)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config from {config_path}: {e}")

    return apply_env_overrides(config)


def get_default_config() -> Dict[str, Any]:
    """Get default configuration values."""
    return {
        'client': {
            'base_url': 'https://old.backpack.tf',
            'login_hosts': ['steamcommunity.com'],
            'identity_cookie': 'user-id',
            'timeout': 30,
            'user_agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36',
            'max_workers': 4,
        },
        'session': {
            'cache_sessions': True,
            'cache_dir': 'cache',
        },
        'logging': {
            'level': 'INFO',
            'log_to_file': False,
            'log_filename': 'bptf.log',
            'logs_dir': 'logs',
            'rotate_logs': True
        },
    }


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def _split_hosts(value: str):
    return [host.strip().lower() for host in value.split(',') if host.strip()]


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration."""
    env_mappings = {
        'BPTF_BASE_URL': ('client', 'base_url', str),
        'BPTF_LOGIN_HOSTS': ('client', 'login_hosts', _split_hosts),
        'BPTF_TIMEOUT': ('client', 'timeout', float),
        'BPTF_USER_AGENT': ('client', 'user_agent', str),
        'BPTF_CACHE_DIR': ('session', 'cache_dir', str),
        'LOG_LEVEL': ('logging', 'level', str),
        'DEBUG_MODE': ('logging', 'level', lambda x: 'DEBUG' if x.lower() == 'true' else config['logging']['level'])
    }

    for env_var, (section, key, converter) in env_mappings.items():
        value = os.getenv(env_var)
        if value is not None:
            try:
                config.setdefault(section, {})[key] = converter(value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid value for {env_var}: {value} - {e}")

    return config
