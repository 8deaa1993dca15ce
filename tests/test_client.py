"""
Unit tests for BackpackTFClient operations
"""
import pytest
from unittest.mock import Mock
import requests

from bptf_login.client import BackpackTFClient, OperationResult
from bptf_login.exceptions import (
    NotAuthenticatedError,
    ValidationError,
    KeyNotFoundError,
    TransportError,
    LoginFailedError,
    CookieError
)
from bptf_login.plugins.base_plugin import LoginResult

from conftest import make_response, STEAM_LOGIN_URL

MUTATING_OPERATIONS = [
    ('generate_api_key', ('https://example.com', 'my bot')),
    ('revoke_api_key', ('ABCDEF123456',)),
    ('update_settings', ({'currency': 'keys'},)),
    ('generate_access_token', ()),
]

ALL_OPERATIONS = MUTATING_OPERATIONS + [
    ('get_api_key', ()),
    ('get_settings', ()),
    ('get_access_token', ()),
]


def respond(transport, text, url='https://old.backpack.tf/'):
    transport.return_value = make_response(text, url=url)


def sent_form(transport):
    return transport.call_args.kwargs['data']


class TestOperationResult:
    """Test the result type"""

    def test_unpacks_as_error_value(self):
        error, value = OperationResult(value='abc')

        assert error is None
        assert value == 'abc'

    def test_unwrap_raises_error(self):
        result = OperationResult(error=ValidationError('bad'))

        assert not result.ok
        with pytest.raises(ValidationError):
            result.unwrap()

    def test_unwrap_value(self):
        assert OperationResult(value={'a': '1'}).unwrap() == {'a': '1'}


class TestAuthenticationChecks:
    """Checks shared by every operation"""

    @pytest.mark.parametrize('name,args', MUTATING_OPERATIONS)
    def test_mutation_without_identity_makes_no_request(self, client, transport, name, args):
        error, value = getattr(client, name)(*args)

        assert isinstance(error, NotAuthenticatedError)
        assert value is None
        assert transport.call_count == 0

    @pytest.mark.parametrize('name,args', ALL_OPERATIONS)
    def test_redirect_to_steam_means_not_authenticated(self, logged_in_client, transport, html_pages, name, args):
        # Even a body that looks like a valid page must not be read
        respond(transport, html_pages['apikey_view'], url=STEAM_LOGIN_URL)

        error, value = getattr(logged_in_client, name)(*args)

        assert isinstance(error, NotAuthenticatedError)
        assert value is None

    @pytest.mark.parametrize('name,args', ALL_OPERATIONS)
    def test_transport_failure_is_returned(self, logged_in_client, transport, name, args):
        transport.side_effect = requests.exceptions.ConnectionError('unreachable')

        error, value = getattr(logged_in_client, name)(*args)

        assert isinstance(error, TransportError)
        assert transport.call_count == 1

    @pytest.mark.parametrize('name,args', ALL_OPERATIONS)
    def test_one_request_per_operation(self, logged_in_client, transport, html_pages, name, args):
        respond(transport, html_pages['apikey_view'])

        getattr(logged_in_client, name)(*args)

        assert transport.call_count == 1


class TestAPIKey:
    """Test API key operations"""

    def test_get_api_key_none_yet(self, client, transport, html_pages):
        respond(transport, html_pages['apikey_none'])

        assert client.get_api_key() == (None, None)

    def test_get_api_key(self, client, transport, html_pages):
        respond(transport, html_pages['apikey_view'])

        assert client.get_api_key() == (None, 'ABCDEF123456')
        assert transport.call_args.kwargs['method'] == 'GET'
        assert transport.call_args.kwargs['url'] == 'https://old.backpack.tf/developer/apikey/view'

    def test_get_api_key_missing_field(self, client, transport, html_pages):
        respond(transport, html_pages['apikey_missing'])

        error, value = client.get_api_key()

        assert isinstance(error, KeyNotFoundError)
        assert error.message == 'Could not find API key'

    def test_generate_api_key(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['apikey_view'])

        error, value = logged_in_client.generate_api_key('https://example.com', 'my bot')

        assert error is None
        assert value == 'ABCDEF123456'
        assert transport.call_args.kwargs['method'] == 'POST'
        assert sent_form(transport) == {
            'url': 'https://example.com',
            'comments': 'my bot',
            'user-id': 'f00dcafe',
        }

    def test_generate_api_key_rejected(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['danger_alert'])

        error, value = logged_in_client.generate_api_key('https://example.com', '')

        assert isinstance(error, ValidationError)
        assert error.message == 'Comment is required.'
        assert value is None

    def test_generate_api_key_blank_alert(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['blank_alert'])

        error, _ = logged_in_client.generate_api_key('https://example.com', 'x')

        assert error.message == 'An error occurred'

    def test_generate_api_key_missing_field(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['apikey_missing'])

        error, _ = logged_in_client.generate_api_key('https://example.com', 'x')

        assert isinstance(error, KeyNotFoundError)

    def test_revoke_api_key(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['revoke_ok'])

        assert logged_in_client.revoke_api_key('ABCDEF123456') == (None, None)
        assert transport.call_args.kwargs['url'] == 'https://old.backpack.tf/developer/apikey/revoke'
        assert sent_form(transport) == {
            'identifier': '',
            'user-id': 'f00dcafe',
            'confirm_apikey': 'ABCDEF123456',
        }

    def test_revoke_api_key_wrong_key(self, logged_in_client, transport):
        respond(transport, '<div class="alert alert-danger">The API key you entered does not match.</div>')

        error, _ = logged_in_client.revoke_api_key('WRONG')

        assert isinstance(error, ValidationError)
        assert error.message == 'The API key you entered does not match.'


class FakeSettingsServer:
    """Serves the settings page and echoes back whatever was accepted"""

    def __init__(self, settings):
        self.settings = dict(settings)
        self.calls = 0

    def render(self):
        fields = ''.join(
            f'<input type="text" name="{name}" value="{value}">'
            for name, value in self.settings.items()
        )
        return f"""
        <form id="settings-form" method="post">
            <input type="hidden" name="user-id" value="f00dcafe">
            {fields}
        </form>
        """

    def __call__(self, method, url, data=None, **kwargs):
        self.calls += 1
        if method == 'POST':
            self.settings.update({k: v for k, v in data.items() if k != 'user-id'})
        return make_response(self.render(), url=url)


class TestSettings:
    """Test settings operations"""

    def test_get_settings(self, client, transport, html_pages):
        respond(transport, html_pages['settings'])

        error, settings = client.get_settings()

        assert error is None
        assert settings['currency'] == 'keys'
        assert 'user-id' not in settings

    def test_get_settings_is_idempotent(self, client, transport, html_pages):
        respond(transport, html_pages['settings'])

        first = client.get_settings()
        second = client.get_settings()

        assert first == second

    def test_update_settings_sends_identity(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['settings'])

        error, saved = logged_in_client.update_settings({'currency': 'keys', 'bio': 'hello'})

        assert error is None
        assert sent_form(transport) == {'currency': 'keys', 'bio': 'hello', 'user-id': 'f00dcafe'}
        assert 'user-id' not in saved

    def test_update_settings_does_not_modify_argument(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['settings'])
        desired = {'currency': 'keys'}

        logged_in_client.update_settings(desired)

        assert desired == {'currency': 'keys'}

    def test_update_settings_warnings(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['settings_warning'])

        error, value = logged_in_client.update_settings({'name': 'x' * 500})

        assert isinstance(error, ValidationError)
        assert error.message == 'Name too long Invalid avatar URL'
        assert value is None

    def test_update_then_get_round_trip(self, logged_in_session):
        server = FakeSettingsServer({'currency': 'metal', 'bio': 'old'})
        logged_in_session.http.request = server
        client = BackpackTFClient(session=logged_in_session, plugin=Mock())
        desired = {'currency': 'keys', 'tradeoffers_url': 'https://steamcommunity.com/tradeoffer/new/'}

        error, _ = client.update_settings(desired)
        assert error is None

        error, settings = client.get_settings()

        assert error is None
        for key, value in desired.items():
            assert settings[key] == value
        assert server.calls == 2


class TestAccessToken:
    """Test access token operations"""

    def test_get_access_token(self, client, transport, html_pages):
        respond(transport, html_pages['connections'])

        assert client.get_access_token() == (None, 'tok_0123456789abcdef')
        assert transport.call_args.kwargs['url'] == 'https://old.backpack.tf/connections'

    def test_get_access_token_none(self, client, transport, html_pages):
        respond(transport, html_pages['connections_empty'])

        assert client.get_access_token() == (None, None)

    def test_get_access_token_alert(self, client, transport, html_pages):
        respond(transport, html_pages['danger_alert'])

        error, _ = client.get_access_token()

        assert isinstance(error, ValidationError)

    def test_generate_access_token(self, logged_in_client, transport, html_pages):
        respond(transport, html_pages['connections'])

        assert logged_in_client.generate_access_token() == (None, 'tok_0123456789abcdef')
        assert transport.call_args.kwargs['url'] == 'https://old.backpack.tf/generate_token'
        assert sent_form(transport) == {'user-id': 'f00dcafe'}


class TestLogin:
    """Test cookie seeding and login"""

    def test_set_cookies(self, client):
        assert client.set_cookies(['sessionid=abc', 'steamLoginSecure=xyz']) == (None, 2)

    def test_set_cookies_all_malformed(self, client):
        error, _ = client.set_cookies(['garbage'])

        assert isinstance(error, CookieError)

    def test_login_success(self, session):
        def fake_login(http, target_url):
            http.cookies.set('user-id', 'abc123', domain='.backpack.tf')
            return LoginResult(success=True)

        plugin = Mock()
        plugin.login.side_effect = fake_login
        client = BackpackTFClient(session=session, plugin=plugin)

        assert client.login() == (None, 'abc123')
        assert client.is_authenticated()
        plugin.login.assert_called_once_with(session.http, 'https://old.backpack.tf/login')

    def test_login_failure(self, session):
        plugin = Mock()
        plugin.login.return_value = LoginResult(success=False, error_message='Steam said no')
        client = BackpackTFClient(session=session, plugin=plugin)

        error, _ = client.login()

        assert isinstance(error, LoginFailedError)
        assert error.message == 'Steam said no'

    def test_login_without_identity_cookie(self, session):
        plugin = Mock()
        plugin.login.return_value = LoginResult(success=True)
        client = BackpackTFClient(session=session, plugin=plugin)

        error, _ = client.login()

        assert isinstance(error, NotAuthenticatedError)
        assert not client.is_authenticated()


class TestSubmit:
    """Test future-based invocation"""

    def test_submit_resolves_to_result(self, client, transport, html_pages):
        respond(transport, html_pages['apikey_view'])

        with client:
            future = client.submit('get_api_key')
            result = future.result(timeout=5)

        assert result == OperationResult(value='ABCDEF123456')

    def test_submit_carries_errors(self, client, transport):
        with client:
            result = client.submit('revoke_api_key', 'ABCDEF123456').result(timeout=5)

        assert isinstance(result.error, NotAuthenticatedError)
        assert transport.call_count == 0

    def test_submit_unknown_operation(self, client):
        with pytest.raises(ValueError):
            client.submit('close')
