#!/usr/bin/env python3
"""
backpack.tf Account Client
==========================

Automates the account pages of backpack.tf that have no API: API key
lifecycle, access token lifecycle and account settings.

Features:
- Cookie-backed session seeded from Steam cookies
- Steam OpenID login handshake
- Detection of silent logouts (redirects to Steam)
- Round-tripping of hidden identity fields in forms
- Typed errors from the site's alert and warning markup

Usage:
    from bptf_login import BackpackTFClient

    client = BackpackTFClient()
    client.set_cookies(["steamLoginSecure=...; Domain=steamcommunity.com; Path=/"])
    error, identity = client.login()

    error, api_key = client.get_api_key()
    error, settings = client.get_settings()
"""

from .client import BackpackTFClient, OperationResult
from .config import ClientConfig, load_config
from .session_store import SessionStore, AuthSession
from .plugins.base_plugin import BaseLoginPlugin, LoginResult
from .plugins.steam_openid import SteamOpenIDPlugin
from .exceptions import (
    BackpackTFError,
    NotAuthenticatedError,
    ValidationError,
    ExtractionError,
    KeyNotFoundError,
    TransportError,
    LoginFailedError,
    CookieError,
    ConfigurationError
)

__version__ = "1.0.0"

__all__ = [
    'BackpackTFClient',
    'OperationResult',
    'ClientConfig',
    'load_config',
    'SessionStore',
    'AuthSession',
    'BaseLoginPlugin',
    'LoginResult',
    'SteamOpenIDPlugin',
    'BackpackTFError',
    'NotAuthenticatedError',
    'ValidationError',
    'ExtractionError',
    'KeyNotFoundError',
    'TransportError',
    'LoginFailedError',
    'CookieError',
    'ConfigurationError'
]
