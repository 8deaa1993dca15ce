"""
Test configuration and shared fixtures for backpacktf-login tests
"""
import pytest
import tempfile
import shutil
from pathlib import Path
from unittest.mock import Mock

import requests
from requests.cookies import create_cookie

from bptf_login.config import ClientConfig
from bptf_login.session_store import AuthSession
from bptf_login.client import BackpackTFClient

BASE_URL = 'https://old.backpack.tf'
STEAM_LOGIN_URL = 'https://steamcommunity.com/openid/login?openid.mode=checkid_setup'


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


def make_response(text: str = '', url: str = BASE_URL + '/', status_code: int = 200, history=None):
    """Build a mock requests.Response that has already followed its redirects"""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    response.url = url
    response.history = history or []
    if status_code >= 400:
        response.raise_for_status = Mock(side_effect=requests.exceptions.HTTPError(f"{status_code} Error"))
    else:
        response.raise_for_status = Mock()
    return response


@pytest.fixture
def client_config():
    """Default client configuration"""
    return ClientConfig(base_url=BASE_URL, login_hosts=['steamcommunity.com'], timeout=5)


@pytest.fixture
def session(client_config):
    """Session without an identity cookie"""
    return AuthSession(client_config)


@pytest.fixture
def logged_in_session(client_config):
    """Session carrying the backpack.tf identity cookie"""
    auth_session = AuthSession(client_config)
    auth_session.cookies.set_cookie(create_cookie('user-id', 'f00dcafe', domain='backpack.tf'))
    return auth_session


@pytest.fixture
def transport():
    """Replacement for requests.Session.request that counts calls"""
    return Mock(return_value=make_response())


@pytest.fixture
def client(session, transport):
    """Client without identity, with the network replaced by `transport`"""
    session.http.request = transport
    return BackpackTFClient(session=session, plugin=Mock())


@pytest.fixture
def logged_in_client(logged_in_session, transport):
    """Client with identity, with the network replaced by `transport`"""
    logged_in_session.http.request = transport
    return BackpackTFClient(session=logged_in_session, plugin=Mock())


@pytest.fixture
def html_pages():
    """Fixed copies of the backpack.tf pages the client reads"""
    return {
        'apikey_none': """
        <html><body>
            <form method="post" action="/developer/apikey/view">
                <input type="hidden" name="user-id" value="f00dcafe">
                <input type="text" name="url" placeholder="Site URL">
                <textarea name="comments"></textarea>
                <input type="submit" class="btn btn-primary" value="Generate my API key">
            </form>
        </body></html>
        """,
        'apikey_view': """
        <html><body>
            <div class="panel">
                <label>Your API key</label>
                <input type="text" class="form-control" readonly value="ABCDEF123456">
            </div>
            <form method="post" action="/developer/apikey/revoke">
                <input type="hidden" name="user-id" value="f00dcafe">
                <input type="text" name="confirm_apikey">
            </form>
        </body></html>
        """,
        'apikey_missing': """
        <html><body>
            <div class="panel"><p>Something changed.</p></div>
        </body></html>
        """,
        'danger_alert': """
        <html><body>
            <div class="alert alert-danger"><i class="fa fa-warning"></i> <strong>Error:</strong> Comment is required.
            </div>
            <input type="text" readonly value="SHOULD-NOT-BE-READ">
        </body></html>
        """,
        'blank_alert': """
        <html><body>
            <div class="alert alert-danger"><strong>Error:</strong>   </div>
        </body></html>
        """,
        'revoke_ok': """
        <html><body>
            <div class="alert alert-success">Your API key was revoked.</div>
        </body></html>
        """,
        'settings': """
        <html><body>
            <form id="settings-form" method="post" action="/settings">
                <input type="hidden" name="user-id" value="f00dcafe">
                <input type="text" name="tradeoffers_url" value="https://steamcommunity.com/tradeoffer/new/?partner=1">
                <input type="checkbox" name="notifications_trades" value="1" checked>
                <input type="checkbox" name="notifications_price" value="1">
                <select name="currency">
                    <option value="metal">Refined</option>
                    <option value="keys" selected>Keys</option>
                </select>
                <textarea name="bio">Trading since 2012</textarea>
                <input type="submit" name="save" value="Save">
            </form>
        </body></html>
        """,
        'settings_warning': """
        <html><body>
            <div class="alert alert-warning">
                <ul><li>Name too long</li><li>Invalid avatar URL</li></ul>
            </div>
            <form id="settings-form" method="post" action="/settings">
                <input type="hidden" name="user-id" value="f00dcafe">
            </form>
        </body></html>
        """,
        'connections': """
        <html><body>
            <form method="post" action="/generate_token">
                <input type="hidden" name="user-id" value="f00dcafe">
                <input type="text" class="form-control" readonly value="tok_0123456789abcdef">
                <button type="submit">Generate new token</button>
            </form>
        </body></html>
        """,
        'connections_empty': """
        <html><body>
            <form method="post" action="/generate_token">
                <input type="hidden" name="user-id" value="f00dcafe">
                <button type="submit">Generate token</button>
            </form>
        </body></html>
        """,
        'steam_openid': """
        <html><body>
            <form id="openidForm" name="openidForm" action="https://steamcommunity.com/openid/login" method="POST">
                <input type="hidden" name="action" value="steam_openid_login">
                <input type="hidden" name="openid.mode" value="checkid_setup">
                <input type="hidden" name="nonce" value="abc123">
                <input type="submit" class="btn_green_white_innerfade" value="Sign In">
            </form>
        </body></html>
        """,
        'steam_password': """
        <html><body>
            <form id="loginForm"><input type="password" name="password"></form>
        </body></html>
        """,
    }
