#!/usr/bin/env python3
"""
Steam OpenID Login Plugin

Signs in to a site that delegates login to Steam. The caller's Steam
cookies must already be in the jar: Steam then shows an OpenID consent
form instead of a password prompt, and submitting that form sends the
browser back to the site with its session cookies set.
"""

import logging
from typing import Dict, Any

import requests

from .base_plugin import BaseLoginPlugin, LoginResult
from ..forms import parse_document, serialize_form
from ..utils import extract_domain, normalize_url

logger = logging.getLogger(__name__)

OPENID_FORM = 'form#openidForm'


class SteamOpenIDPlugin(BaseLoginPlugin):
    """Login via the Steam community OpenID provider"""

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        self.provider_hosts = set(self.config.get('provider_hosts', ['steamcommunity.com']))

    def login(self, http: requests.Session, target_url: str) -> LoginResult:
        timeout = self.get_timeout()

        try:
            response = http.get(target_url, allow_redirects=True, timeout=timeout)
            response.raise_for_status()

            if extract_domain(response.url) not in self.provider_hosts:
                # The site let us straight in
                logger.info(f"Already signed in to {extract_domain(target_url)}")
                return LoginResult(success=True, response=response)

            soup = parse_document(response.text)
            form = soup.select_one(OPENID_FORM)
            if form is None:
                return LoginResult(
                    success=False,
                    response=response,
                    error_message="Could not find the OpenID login form, are the Steam cookies valid?"
                )

            action = form.get('action') or response.url
            action_url = normalize_url(action, response.url)
            method = form.get('method', 'POST').upper()

            logger.debug(f"Submitting OpenID form to {action_url}")
            response = http.request(
                method=method,
                url=action_url,
                data=serialize_form(form),
                allow_redirects=True,
                timeout=timeout
            )
            response.raise_for_status()

        except requests.exceptions.RequestException as e:
            return LoginResult(
                success=False,
                error_message=f"Network error during login: {str(e)}"
            )

        if extract_domain(response.url) in self.provider_hosts:
            return LoginResult(
                success=False,
                response=response,
                error_message="Steam did not redirect back to the site"
            )

        return LoginResult(success=True, response=response)
