#!/usr/bin/env python3
"""
Session Storage and Management

An AuthSession owns the cookie jar every request is sent with. The
identity token that mutating forms require is read from that jar on
demand, never cached, because the site may rotate it.
"""

import json
import gzip
import logging
import threading
import time
from datetime import datetime
from http.cookies import SimpleCookie, CookieError as MorselError
from http.cookiejar import Cookie, http2time
from pathlib import Path
from typing import Optional, Dict, Any, Iterable, List

import requests
from requests.cookies import create_cookie

from .config import ClientConfig
from .exceptions import CookieError
from .utils import domain_matches, sanitize_session_id

logger = logging.getLogger(__name__)


def _cookie_expiry(morsel) -> Optional[int]:
    """Expiry timestamp of a morsel; Max-Age wins over Expires"""
    if morsel['max-age']:
        try:
            return int(time.time()) + int(morsel['max-age'])
        except ValueError as e:
            raise CookieError(f"Invalid Max-Age: {morsel['max-age']}") from e
    if morsel['expires']:
        # Accepts both "Wed, 21 Oct 2026 07:28:00 GMT" and "Wed, 21-Oct-2026 07:28:00 GMT"
        expires = http2time(morsel['expires'])
        if expires is None:
            raise CookieError(f"Invalid Expires: {morsel['expires']}")
        return expires
    return None


def parse_set_cookie(raw: str, default_domain: str) -> Cookie:
    """
    Parse one Set-Cookie style string into a cookie for default_domain

    Args:
        raw: e.g. "sessionid=abc; Domain=steamcommunity.com; Path=/"
        default_domain: Domain the cookie is scoped to when it names none

    Returns:
        http.cookiejar.Cookie ready for a RequestsCookieJar

    Raises:
        CookieError: If the string holds no cookie, has a bad expiry or names a foreign domain
    """
    parsed = SimpleCookie()
    try:
        parsed.load(raw)
    except MorselError as e:
        raise CookieError(f"Malformed cookie: {e}") from e

    morsels = list(parsed.values())
    if len(morsels) != 1:
        raise CookieError(f"Expected exactly one cookie, found {len(morsels)}")
    morsel = morsels[0]

    domain = morsel['domain']
    if not domain:
        domain = default_domain
    elif not domain_matches(default_domain, domain):
        raise CookieError(f"Cookie domain {domain} does not match {default_domain}")

    return create_cookie(
        morsel.key,
        morsel.value,
        domain=domain,
        path=morsel['path'] or '/',
        secure=bool(morsel['secure']),
        expires=_cookie_expiry(morsel),
        rest={'HttpOnly': morsel['httponly']}
    )


class AuthSession:
    """Cookie-backed session for one backpack.tf account"""

    def __init__(self, config: ClientConfig = None, session_data: Dict[str, Any] = None):
        self.config = config or ClientConfig()
        self.session_id = sanitize_session_id(self.config.base_url)
        self.lock = threading.RLock()

        self.http = requests.Session()
        if self.config.user_agent:
            self.http.headers['User-Agent'] = self.config.user_agent

        if session_data:
            self.created_at = datetime.fromisoformat(session_data['created_at'])
            self.metadata = session_data.get('metadata', {})
            for cookie_data in session_data.get('cookies', []):
                self.cookies.set_cookie(create_cookie(**cookie_data))
            self.cookies.clear_expired_cookies()
        else:
            self.created_at = datetime.now()
            self.metadata = {}

    @property
    def cookies(self) -> requests.cookies.RequestsCookieJar:
        return self.http.cookies

    def seed(self, cookies: Iterable[str]) -> int:
        """
        Store caller-supplied Set-Cookie strings under the identity provider's domain

        The login handshake derives the application cookies from these, so
        they are not scoped to the application itself.

        Args:
            cookies: Raw Set-Cookie strings

        Returns:
            Number of cookies stored

        Raises:
            CookieError: If the batch is non-empty and no cookie could be parsed
        """
        cookies = list(cookies)
        stored = 0

        with self.lock:
            for raw in cookies:
                try:
                    cookie = parse_set_cookie(raw, self.config.provider_host)
                except CookieError as e:
                    logger.warning(f"Skipping cookie: {e}")
                    continue
                self.cookies.set_cookie(cookie)
                stored += 1

        if cookies and not stored:
            raise CookieError("None of the supplied cookies could be parsed")

        logger.debug(f"Seeded {stored} of {len(cookies)} cookies for {self.config.provider_host}")
        return stored

    def identity(self) -> Optional[str]:
        """Value of the identity cookie scoped to the application, or None"""
        name = self.config.identity_cookie
        host = self.config.app_host
        with self.cookies._cookies_lock:
            cookies = list(self.cookies)
        for cookie in cookies:
            if cookie.name == name and domain_matches(host, cookie.domain):
                return cookie.value
        return None

    def clear(self):
        """Drop every cookie"""
        with self.lock:
            self.cookies.clear()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        cookies: List[Dict[str, Any]] = []
        with self.cookies._cookies_lock:
            jar = list(self.cookies)
        for cookie in jar:
            cookies.append({
                'name': cookie.name,
                'value': cookie.value,
                'domain': cookie.domain,
                'path': cookie.path,
                'secure': cookie.secure,
                'expires': cookie.expires,
            })
        return {
            'base_url': self.config.base_url,
            'session_id': self.session_id,
            'created_at': self.created_at.isoformat(),
            'cookies': cookies,
            'metadata': self.metadata
        }


class SessionStore:
    """Persists session cookies between runs"""

    def __init__(self, cache_dir: Path = None):
        self.cache_dir = Path(cache_dir) if cache_dir else Path.cwd() / 'cache'
        self.auth_cache_dir = self.cache_dir / 'auth_sessions'
        self.auth_cache_dir.mkdir(parents=True, exist_ok=True)

    def _get_session_file(self, base_url: str) -> Path:
        """Get session file path for site"""
        session_id = sanitize_session_id(base_url)
        return self.auth_cache_dir / f"{session_id}_auth_session.json.gz"

    def save_session(self, auth_session: AuthSession):
        """Save session cookies to cache"""
        session_file = self._get_session_file(auth_session.config.base_url)
        auth_session.metadata['last_saved'] = datetime.now().isoformat()

        try:
            with gzip.open(session_file, 'wt', encoding='utf-8') as f:
                json.dump(auth_session.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            # Session caching is optional
            logger.warning(f"Failed to save session cache: {e}")

    def load_session(self, config: ClientConfig) -> Optional[AuthSession]:
        """Load cached session for the configured site"""
        session_file = self._get_session_file(config.base_url)

        if not session_file.exists():
            return None

        try:
            with gzip.open(session_file, 'rt', encoding='utf-8') as f:
                session_data = json.load(f)
            return AuthSession(config, session_data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load session cache: {e}")
            self.delete_session(config.base_url)
            return None

    def delete_session(self, base_url: str):
        """Delete cached session"""
        session_file = self._get_session_file(base_url)
        try:
            if session_file.exists():
                session_file.unlink()
        except OSError as e:
            logger.warning(f"Failed to delete session cache: {e}")

    def is_session_cached(self, base_url: str) -> bool:
        return self._get_session_file(base_url).exists()
