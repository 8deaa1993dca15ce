#!/usr/bin/env python3
"""
Base Login Plugin
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, NamedTuple

import requests


class LoginResult(NamedTuple):
    """Result of a login handshake"""
    success: bool
    response: Optional[requests.Response] = None
    error_message: Optional[str] = None


class BaseLoginPlugin(ABC):
    """Abstract base class for identity-provider login handshakes"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize plugin with configuration

        Args:
            config: Plugin-specific configuration dictionary
        """
        self.config = config or {}

    @abstractmethod
    def login(self, http: requests.Session, target_url: str) -> LoginResult:
        """
        Run the handshake so the session ends up signed in to target_url

        Cookies set along the way land in http.cookies.

        Args:
            http: requests.Session carrying the cookie jar to populate
            target_url: The application's login entry point

        Returns:
            LoginResult indicating success/failure
        """
        pass

    def get_timeout(self) -> float:
        return self.config.get('timeout', 30)
