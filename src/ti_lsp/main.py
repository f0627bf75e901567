"""CLI entry point: start the language server on stdio."""

import logging
import shutil
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from .config import Config

INSTALL_URL = "https://github.com/engneer-hamachan/ruby-ti"


def configure_logging(level: str, log_file: str | None) -> None:
    """Send logs to stderr (stdout carries the protocol) or to a file."""
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)

    logging.basicConfig(level=level.upper(), format="%(message)s", handlers=[handler], force=True)


@click.command()
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Minimum level of log messages",
)
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to this file")
def cli(log_level: str, log_file: str | None):
    """Ruby language server powered by the ti type inference oracle.

    Examples:
        # Editors launch the server over stdio
        ti-lsp

        # Debug a session
        ti-lsp --log-level debug --log-file /tmp/ti-lsp.log
    """
    configure_logging(log_level, log_file)
    config = Config.from_env()

    if shutil.which(config.oracle_executable) is None:
        click.echo(f"Error: '{config.oracle_executable}' command not found in PATH", err=True)
        click.echo("ti-lsp requires the Ruby-TI 'ti' command to be installed", err=True)
        click.echo(f"Please install Ruby-TI: {INSTALL_URL}", err=True)
        sys.exit(1)

    from .server import create_server

    server = create_server(config)
    logging.getLogger(__name__).info("Starting ti-lsp (oracle: %s)", config.oracle_executable)
    server.start_io()


if __name__ == "__main__":
    cli()
