"""
Command line entry points.

    eventgate serve            run the API under uvicorn
    eventgate hash-password    print a bcrypt hash for the remote AppSetting
"""

import sys

import click
import uvicorn
from dotenv import load_dotenv

from eventgate.config.provider import EnvConfigProvider
from eventgate.logging_config import configure_logging, get_logging_config
from eventgate.modules.auth.passwords import hash_password


@click.group()
def cli():
    """Eventgate event registration backend."""
    load_dotenv()


@cli.command()
@click.option("--host", "host", default=None, help="Bind address (default: API_HOST or 0.0.0.0)")
@click.option("--port", "port", default=None, type=int, help="Port (default: API_PORT or 8080)")
@click.option("--reload", "reload", is_flag=True, default=False, help="Reload on code changes")
def serve(host, port, reload):
    """Run the HTTP API."""
    api_config = EnvConfigProvider().get_api_config()
    configure_logging(api_config.log_level)

    uvicorn.run(
        "eventgate.main:app",
        host=host or api_config.host,
        port=port or api_config.port,
        log_level=api_config.log_level.lower(),
        reload=reload or api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )


@cli.command("hash-password")
@click.option("-p", "--password", "password", default="", help="Password to hash (prompted when empty)")
def hash_password_command(password):
    """Print the bcrypt hash of a registration password."""
    if not password:
        if sys.stdin.isatty():
            password = click.prompt("Password", hide_input=True, err=True, default="", show_default=False)
        else:
            password = sys.stdin.readline()
    password = password.strip()

    if not password:
        click.echo("empty password", err=True)
        sys.exit(2)

    try:
        hashed = hash_password(password)
    except ValueError as e:
        click.echo(f"failed to hash password: {e}", err=True)
        sys.exit(1)

    click.echo(hashed)


if __name__ == "__main__":
    cli()
