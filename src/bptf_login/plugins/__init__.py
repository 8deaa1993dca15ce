#!/usr/bin/env python3
"""
Login Plugins Package
"""

from .base_plugin import BaseLoginPlugin, LoginResult
from .steam_openid import SteamOpenIDPlugin

__all__ = [
    'BaseLoginPlugin',
    'LoginResult',
    'SteamOpenIDPlugin'
]
