"""
Command-line interface

    bptf login --cookies-file steam_cookies.txt
    bptf apikey show
    bptf settings set trade_offer_url=https://...
"""

import json
import click
from pathlib import Path
from typing import Optional, Tuple

from .client import BackpackTFClient, OperationResult
from .config import ClientConfig, load_config
from .session_store import AuthSession, SessionStore
from .utils import setup_logging


class CLIContext:
    """State shared by every command"""

    def __init__(self, config_path: Optional[str], verbose: bool):
        self.config = load_config(config_path)
        if verbose:
            self.config['logging']['level'] = 'DEBUG'
        setup_logging(self.config['logging'])

        self.client_config = ClientConfig.from_dict(self.config.get('client', {}))
        if not self.config['session'].get('cache_sessions', True):
            raise click.UsageError(
                "session.cache_sessions is false; the CLI needs the session cache to keep a login between runs"
            )
        self.store = SessionStore(Path(self.config['session'].get('cache_dir', 'cache')))

    def new_client(self) -> BackpackTFClient:
        return BackpackTFClient(session=AuthSession(self.client_config))

    def cached_client(self) -> BackpackTFClient:
        session = self.store.load_session(self.client_config)
        if session is None:
            raise click.ClickException("No saved session. Run 'bptf login' first.")
        return BackpackTFClient(session=session)

    def save(self, client: BackpackTFClient):
        self.store.save_session(client.session)


def _unwrap(result: OperationResult):
    if result.error is not None:
        raise click.ClickException(result.error.message)
    return result.value


def _read_cookies(cookies: Tuple[str, ...], cookies_file: Optional[str]):
    collected = list(cookies)
    if cookies_file:
        with open(cookies_file, 'r', encoding='utf-8') as f:
            collected.extend(line.strip() for line in f if line.strip() and not line.startswith('#'))
    return collected


@click.group()
@click.option('--config', '-c', 'config_path',
              type=click.Path(),
              default='config.yaml',
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config_path, verbose):
    """Manage a backpack.tf account: API key, access token and settings."""
    ctx.obj = CLIContext(config_path, verbose)


@cli.command()
@click.option('--cookie', 'cookies', multiple=True,
              help='Steam Set-Cookie string (can be used multiple times)')
@click.option('--cookies-file', type=click.Path(exists=True),
              help='File with one Steam Set-Cookie string per line')
@click.pass_obj
def login(obj: CLIContext, cookies, cookies_file):
    """Sign in through Steam and save the session."""
    cookie_strings = _read_cookies(cookies, cookies_file)
    if not cookie_strings:
        raise click.UsageError('Provide Steam cookies with --cookie or --cookies-file')

    client = obj.new_client()
    stored = _unwrap(client.set_cookies(cookie_strings))
    click.echo(f"🍪 Loaded {stored} of {len(cookie_strings)} cookies")

    identity = _unwrap(client.login())
    obj.save(client)
    click.echo(f"🔐 Signed in to {obj.client_config.app_host} (user-id {identity[:6]}...)")


@cli.command()
@click.pass_obj
def logout(obj: CLIContext):
    """Forget the saved session."""
    obj.store.delete_session(obj.client_config.base_url)
    click.echo("Session removed")


@cli.group()
def apikey():
    """API key commands."""
    pass


@apikey.command('show')
@click.pass_obj
def apikey_show(obj: CLIContext):
    """Print the current API key."""
    client = obj.cached_client()
    api_key = _unwrap(client.get_api_key())
    obj.save(client)
    click.echo(api_key if api_key is not None else "No API key has been generated")


@apikey.command('generate')
@click.option('--url', required=True, help='Site the key will be used for')
@click.option('--comment', required=True, help='What the key is for')
@click.pass_obj
def apikey_generate(obj: CLIContext, url, comment):
    """Generate an API key."""
    client = obj.cached_client()
    api_key = _unwrap(client.generate_api_key(url, comment))
    obj.save(client)
    click.echo(api_key)


@apikey.command('revoke')
@click.argument('key')
@click.confirmation_option(prompt='Revoke this API key?')
@click.pass_obj
def apikey_revoke(obj: CLIContext, key):
    """Revoke an API key."""
    client = obj.cached_client()
    _unwrap(client.revoke_api_key(key))
    obj.save(client)
    click.echo("API key revoked")


@cli.group()
def settings():
    """Account settings commands."""
    pass


@settings.command('show')
@click.pass_obj
def settings_show(obj: CLIContext):
    """Print the current settings as JSON."""
    client = obj.cached_client()
    current = _unwrap(client.get_settings())
    obj.save(client)
    click.echo(json.dumps(current, indent=2, sort_keys=True))


@settings.command('set')
@click.argument('assignments', nargs=-1, required=True)
@click.pass_obj
def settings_set(obj: CLIContext, assignments):
    """Change settings given as KEY=VALUE pairs; other settings keep their current values."""
    changes = {}
    for assignment in assignments:
        key, sep, value = assignment.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got {assignment!r}")
        changes[key] = value

    client = obj.cached_client()
    current = _unwrap(client.get_settings())
    current.update(changes)
    saved = _unwrap(client.update_settings(current))
    obj.save(client)
    click.echo(json.dumps(saved, indent=2, sort_keys=True))


@cli.group()
def token():
    """Access token commands."""
    pass


@token.command('show')
@click.pass_obj
def token_show(obj: CLIContext):
    """Print the current access token."""
    client = obj.cached_client()
    access_token = _unwrap(client.get_access_token())
    obj.save(client)
    click.echo(access_token or "No access token")


@token.command('generate')
@click.pass_obj
def token_generate(obj: CLIContext):
    """Generate a new access token (the old one stops working)."""
    client = obj.cached_client()
    access_token = _unwrap(client.generate_access_token())
    obj.save(client)
    click.echo(access_token or "No access token")


def main():
    cli()


if __name__ == '__main__':
    main()
