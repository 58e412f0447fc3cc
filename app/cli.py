"""
Telecom verification CLI

Starts the verification service with the chosen balancer strategy.

    telecom --balancer round-robin -p 5000
"""
import sys

import click
import uvicorn
from pydantic import ValidationError

from app.core.config import Settings
from app.core.exceptions import TelecomError
from app.core.logging import setup_logging, get_logger
from app.factory import create_app
from utils.constants import BALANCER_ALIASES, DEFAULT_HOST, DEFAULT_PORT, SERVICE_VERSION

logger = get_logger(__name__)


@click.command()
@click.version_option(version=SERVICE_VERSION)
@click.option('--balancer', '-b', required=True,
              type=click.Choice(sorted(BALANCER_ALIASES), case_sensitive=False),
              help='Strategy in selecting what telecom provider handles a verification attempt')
@click.option('--port', '-p', type=click.IntRange(1, 65535), default=None,
              help=f'Port the telecom verification service runs on  [default: PORT or {DEFAULT_PORT}]')
@click.option('--host', default=None,
              help=f'Interface the telecom verification service binds to  [default: HOST or {DEFAULT_HOST}]')
def main(balancer, port, host):
    """
    Telecom verification service.

    Dispatches phone verification attempts across the configured carriers
    and ranks them by weighted outcome. Command line options take
    precedence over the environment.
    """
    try:
        overrides = {"BALANCER": balancer.lower()}
        if port is not None:
            overrides["PORT"] = port
        if host is not None:
            overrides["HOST"] = host
        app_settings = Settings(**overrides)
    except ValidationError as e:
        click.echo(f"✗ Invalid configuration:\n{e}", err=True)
        sys.exit(1)

    setup_logging(app_settings)

    try:
        app = create_app(app_settings)
    except TelecomError as e:
        logger.critical(f"Failed to start application: {e.message}")
        click.echo(f"✗ Error: {e.message}", err=True)
        sys.exit(1)

    host, port = app_settings.HOST, app_settings.PORT
    click.echo(f"Now listening on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=app_settings.LOG_LEVEL.lower())


if __name__ == '__main__':
    main()
