#!/usr/bin/env python3
"""
Client Configuration Model
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from ..exceptions import ConfigurationError
from ..utils import extract_domain

# Pages and form fields of the backpack.tf account area
APIKEY_PATH = '/developer/apikey/view'
APIKEY_REVOKE_PATH = '/developer/apikey/revoke'
SETTINGS_PATH = '/settings'
CONNECTIONS_PATH = '/connections'
GENERATE_TOKEN_PATH = '/generate_token'
LOGIN_PATH = '/login'


@dataclass
class ClientConfig:
    """Configuration for a BackpackTFClient"""
    base_url: str = 'https://old.backpack.tf'
    login_hosts: List[str] = field(default_factory=lambda: ['steamcommunity.com'])
    identity_cookie: str = 'user-id'
    timeout: Optional[float] = 30
    user_agent: Optional[str] = None
    max_workers: int = 4

    def __post_init__(self):
        self.base_url = self.base_url.rstrip('/')
        if not self.app_host:
            raise ConfigurationError(f"Invalid base URL: {self.base_url!r}")
        if not self.login_hosts:
            raise ConfigurationError("At least one login host is required")
        self.login_hosts = [host.lower() for host in self.login_hosts]

    @property
    def app_host(self) -> str:
        """Host of the application, used to scope the identity cookie"""
        return extract_domain(self.base_url)

    @property
    def provider_host(self) -> str:
        """Primary identity-provider host; seeded cookies are scoped to it"""
        return self.login_hosts[0]

    @property
    def login_url(self) -> str:
        return self.base_url + LOGIN_PATH

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ClientConfig':
        """Create ClientConfig from the 'client' section of a config dictionary"""
        known = {
            key: config_dict[key]
            for key in ('base_url', 'login_hosts', 'identity_cookie', 'timeout', 'user_agent', 'max_workers')
            if key in config_dict
        }
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'base_url': self.base_url,
            'login_hosts': list(self.login_hosts),
            'identity_cookie': self.identity_cookie,
            'timeout': self.timeout,
            'user_agent': self.user_agent,
            'max_workers': self.max_workers,
        }
