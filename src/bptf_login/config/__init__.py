#!/usr/bin/env python3
"""
Configuration
=============

Client settings come from three layers, later ones winning:

1. Built-in defaults (``get_default_config``)
2. A YAML file (``config.yaml`` by default)
3. Environment variables, including those in a ``.env`` file
"""

from .client_config import ClientConfig
from .loader import load_config, get_default_config, apply_env_overrides, merge_config

__all__ = [
    'ClientConfig',
    'load_config',
    'get_default_config',
    'apply_env_overrides',
    'merge_config'
]
