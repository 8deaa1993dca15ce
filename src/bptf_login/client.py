#!/usr/bin/env python3
"""
backpack.tf Account Client - API key, access token and settings management

Every public operation returns an OperationResult instead of raising:

    client = BackpackTFClient()
    client.set_cookies(steam_cookies)
    client.login()

    error, api_key = client.get_api_key()
    if error is not None:
        ...

Operations that change account state check for the identity cookie
before touching the network; all of them treat a redirect to Steam as
"not logged in" without looking at the body.
"""

import functools
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Dict, Any, Iterable, NamedTuple

from bs4 import BeautifulSoup

from .config import ClientConfig
from .config.client_config import (
    APIKEY_PATH,
    APIKEY_REVOKE_PATH,
    SETTINGS_PATH,
    CONNECTIONS_PATH,
    GENERATE_TOKEN_PATH
)
from .exceptions import (
    BackpackTFError,
    NotAuthenticatedError,
    ValidationError,
    KeyNotFoundError,
    LoginFailedError
)
from .forms import IDENTITY_FIELD, parse_document, extract_field_value, extract_form_values
from .interpreter import classify_alert, classify_warning_list, join_warnings, has_generation_prompt
from .plugins.base_plugin import BaseLoginPlugin
from .plugins.steam_openid import SteamOpenIDPlugin
from .session_store import AuthSession
from .transport import AuthenticatedRequester

logger = logging.getLogger(__name__)

API_KEY_FIELD = 'input[type=text][readonly]'
SETTINGS_FORM = 'form#settings-form'
TOKEN_FORM = 'form[action="/generate_token"]'
TOKEN_FIELD = 'input[type="text"]'


class OperationResult(NamedTuple):
    """Outcome of an operation: exactly one of error/value carries information"""
    error: Optional[BackpackTFError] = None
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or raise the error"""
        if self.error is not None:
            raise self.error
        return self.value


def operation(method):
    """Turn a raising method into one that returns an OperationResult"""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs) -> OperationResult:
        try:
            return OperationResult(value=method(self, *args, **kwargs))
        except BackpackTFError as e:
            logger.warning(f"{method.__name__} failed: {e.message}")
            return OperationResult(error=e)
    wrapper.is_operation = True
    return wrapper


class BackpackTFClient:
    """Automates account pages on backpack.tf through one authenticated session"""

    def __init__(self, config: ClientConfig = None, session: AuthSession = None,
                 plugin: BaseLoginPlugin = None):
        """
        Initialize client

        Args:
            config: Client configuration (ignored when session is given)
            session: Existing session to reuse, e.g. one loaded from the SessionStore
            plugin: Login handshake; defaults to Steam OpenID
        """
        self.session = session or AuthSession(config)
        self.config = self.session.config
        self.requester = AuthenticatedRequester(self.session)
        self.plugin = plugin or SteamOpenIDPlugin({
            'provider_hosts': self.config.login_hosts,
            'timeout': self.config.timeout
        })
        self._executor: Optional[ThreadPoolExecutor] = None

    # Session handling

    @operation
    def set_cookies(self, cookies: Iterable[str]) -> int:
        """Seed the session with raw Steam Set-Cookie strings"""
        return self.session.seed(cookies)

    @operation
    def login(self) -> str:
        """Sign in to backpack.tf through the login plugin; returns the identity"""
        with self.session.lock:
            result = self.plugin.login(self.session.http, self.config.login_url)

        if not result.success:
            raise LoginFailedError(result.error_message or "Login failed")

        identity = self.session.identity()
        if identity is None:
            raise NotAuthenticatedError("Login finished but no identity cookie was set")

        logger.info(f"Signed in to {self.config.app_host}")
        return identity

    def is_authenticated(self) -> bool:
        """Whether the session holds an identity; says nothing about the server's view"""
        return self.session.identity() is not None

    def _require_identity(self) -> str:
        identity = self.session.identity()
        if identity is None:
            raise NotAuthenticatedError()
        return identity

    def _fetch(self, method: str, path: str, data: Dict[str, Any] = None) -> BeautifulSoup:
        response = self.requester.send(method, path, data=data)
        if self.requester.is_login_redirect(response):
            raise NotAuthenticatedError()
        return parse_document(response.text)

    # API key

    @operation
    def get_api_key(self) -> Optional[str]:
        """Current API key, or None when the account has none yet"""
        document = self._fetch('GET', APIKEY_PATH)

        if has_generation_prompt(document):
            return None

        api_key = extract_field_value(document, API_KEY_FIELD)
        if not api_key:
            raise KeyNotFoundError()
        return api_key

    @operation
    def generate_api_key(self, url: str, comment: str) -> str:
        """Register a new API key for the given site URL and comment"""
        identity = self._require_identity()
        document = self._fetch('POST', APIKEY_PATH, data={
            'url': url,
            'comments': comment,
            IDENTITY_FIELD: identity,
        })

        message = classify_alert(document)
        if message is not None:
            raise ValidationError(message)

        api_key = extract_field_value(document, API_KEY_FIELD)
        if not api_key:
            raise KeyNotFoundError()
        return api_key

    @operation
    def revoke_api_key(self, api_key: str) -> None:
        """Revoke the given API key"""
        identity = self._require_identity()
        document = self._fetch('POST', APIKEY_REVOKE_PATH, data={
            'identifier': '',
            IDENTITY_FIELD: identity,
            'confirm_apikey': api_key,
        })

        message = classify_alert(document)
        if message is not None:
            raise ValidationError(message)

    # Settings

    @operation
    def get_settings(self) -> Dict[str, str]:
        """Snapshot of the settings form"""
        document = self._fetch('GET', SETTINGS_PATH)
        return extract_form_values(document, SETTINGS_FORM)

    @operation
    def update_settings(self, settings: Dict[str, Any]) -> Dict[str, str]:
        """
        Submit a full set of settings and return what the site saved

        The whole field set is posted, not a diff. Fields left out of
        settings are left out of the request; how the site treats them is
        up to the site.
        """
        identity = self._require_identity()
        form = dict(settings)
        form[IDENTITY_FIELD] = identity

        document = self._fetch('POST', SETTINGS_PATH, data=form)

        warnings = classify_warning_list(document)
        if warnings is not None:
            raise ValidationError(join_warnings(warnings))

        return extract_form_values(document, SETTINGS_FORM)

    # Access token

    @operation
    def get_access_token(self) -> Optional[str]:
        """Current third-party access token, or None if the page shows none"""
        document = self._fetch('GET', CONNECTIONS_PATH)

        message = classify_alert(document)
        if message is not None:
            raise ValidationError(message)

        return extract_field_value(document, TOKEN_FIELD, scope=TOKEN_FORM)

    @operation
    def generate_access_token(self) -> Optional[str]:
        """Generate a new access token, invalidating the previous one"""
        identity = self._require_identity()
        document = self._fetch('POST', GENERATE_TOKEN_PATH, data={IDENTITY_FIELD: identity})
        return extract_field_value(document, TOKEN_FIELD, scope=TOKEN_FORM)

    # Futures

    def submit(self, name: str, *args, **kwargs) -> 'Future[OperationResult]':
        """
        Run an operation on the client's worker pool

        Args:
            name: Operation name, e.g. "get_api_key"
            *args, **kwargs: Passed to the operation

        Returns:
            Future resolving to the operation's OperationResult
        """
        method = getattr(self, name, None)
        if not getattr(method, 'is_operation', False):
            raise ValueError(f"Unknown operation: {name}")

        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers,
                thread_name_prefix='bptf'
            )
        return self._executor.submit(method, *args, **kwargs)

    def close(self):
        """Shut down the worker pool and release connections"""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.session.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
