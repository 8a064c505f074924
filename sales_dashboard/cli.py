# sales_dashboard/cli.py
import json
import os

import anyio
import click
import uvicorn
from dotenv import load_dotenv

from sales_dashboard.config import CONFIG_ENV_VAR, configure_logging, load_config
from sales_dashboard.errors import InitializationError
from sales_dashboard.seed import FileSeedSource
from sales_dashboard.service import build_service
from sales_dashboard.utils import parse_month


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (default: $SALES_DASHBOARD_CONFIG or ./config.yaml)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file loaded before the config'
)
@click.pass_context
def main(ctx, config_path, env_file):
    """
    Seed and query the month-filtered sales transaction dashboard.
    """
    if env_file:
        load_dotenv(env_file)
    if config_path:
        # the server builds its app from the environment
        os.environ[CONFIG_ENV_VAR] = str(config_path)
    cfg = load_config(config_path)
    configure_logging(cfg)
    ctx.obj = cfg


@main.command()
@click.option(
    '--source-file', 'source_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Seed from a local JSON file instead of the configured seed URL'
)
@click.pass_obj
def initialize(cfg, source_file):
    """
    Replace all stored transactions with the seed dataset.
    """
    source = FileSeedSource(source_file) if source_file else None
    service = build_service(cfg, seed_source=source)
    try:
        result = service.initialize()
    except InitializationError as e:
        raise click.ClickException(str(e))
    finally:
        service.close()
    click.echo(result["message"])


@main.command()
@click.option('--month', required=True, help='Month number, 1-12')
@click.pass_obj
def report(cfg, month):
    """
    Print transactions, statistics and chart data for a month as JSON.
    """
    service = build_service(cfg)
    try:
        result = anyio.run(service.combined, parse_month(month))
    finally:
        service.close()
    click.echo(json.dumps(result, indent=2))


@main.command()
@click.option('--host', default=None, help='Host to bind (default: server.host from config)')
@click.option('--port', default=None, type=int, help='Port to bind (default: server.port from config)')
@click.pass_obj
def serve(cfg, host, port):
    """
    Run the HTTP API.
    """
    server_cfg = cfg['server']
    uvicorn.run(
        "webapp.main:create_app",
        factory=True,
        host=host or server_cfg['host'],
        port=port or server_cfg['port'],
    )
