#!/usr/bin/env python3
"""
Authenticated Request Layer

Sends requests with the session's cookies and reports where the request
finally landed. backpack.tf sends logged-out visitors to Steam, so a final
host belonging to the identity provider means the session is no longer
authenticated. That is a heuristic: it relies on the site's login gate
redirecting rather than on any explicit signal.
"""

import logging
from typing import Optional, Dict, Any, NamedTuple

import requests

from .exceptions import TransportError
from .session_store import AuthSession
from .utils import extract_domain

logger = logging.getLogger(__name__)


class RawResponse(NamedTuple):
    """Outcome of a request after every redirect has been followed"""
    status_code: int
    final_url: str
    final_host: str
    text: str


class AuthenticatedRequester:
    """Issues requests against the application base URL"""

    def __init__(self, session: AuthSession):
        self.session = session
        self.config = session.config
        self.login_hosts = frozenset(self.config.login_hosts)

    def url_for(self, path: str) -> str:
        return self.config.base_url + path

    def send(self, method: str, path: str, data: Dict[str, Any] = None,
             timeout: Optional[float] = None) -> RawResponse:
        """
        Send a request and follow redirects to the end

        Args:
            method: HTTP method
            path: Path below the base URL
            data: Form fields for the request body
            timeout: Per-call timeout in seconds; defaults to the configured one

        Returns:
            RawResponse describing the final response

        Raises:
            TransportError: On any network or HTTP status failure
        """
        url = self.url_for(path)
        timeout = timeout if timeout is not None else self.config.timeout

        logger.debug(f"{method} {url}")
        try:
            response = self.session.http.request(
                method=method,
                url=url,
                data=data,
                allow_redirects=True,
                timeout=timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

        final_host = extract_domain(response.url)
        if response.history:
            logger.debug(f"{method} {url} redirected to {response.url}")

        return RawResponse(
            status_code=response.status_code,
            final_url=response.url,
            final_host=final_host,
            text=response.text
        )

    def is_login_redirect(self, response: RawResponse) -> bool:
        """True if the request ended on the identity provider"""
        return response.final_host in self.login_hosts
