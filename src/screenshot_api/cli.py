# cli.py
import logging

import click
import uvicorn

from screenshot_api.config.settings import get_settings
from screenshot_api.main import log_startup_banner
from screenshot_api.storage import LocalImageStore

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the Screenshot API server"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  App Name: {settings.app_name}")
    click.echo(f"  Host: {settings.host}")
    click.echo(f"  Port: {settings.port}")
    click.echo(f"  Uploads Directory: {LocalImageStore(settings.uploads_dir).root}")
    click.echo(f"  Max Upload Size: {settings.max_upload_bytes} bytes")
    click.echo(f"  CORS Origins: {', '.join(settings.cors_allow_origins)}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST setting)")
@click.option("--port", default=None, type=int, help="Port to listen on (defaults to PORT setting)")
@click.option("--reload", is_flag=True, default=False, help="Restart on code changes")
def serve(host, port, reload):
    """Run the API server with uvicorn"""
    settings = get_settings()
    if host or port:
        settings = settings.model_copy(
            update={
                "host": host or settings.host,
                "port": port or settings.port,
            }
        )

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    log_startup_banner(settings)

    uvicorn.run(
        "screenshot_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
