"""Main CLI entry point."""

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from callwire import __version__

# Load .env from cwd
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


@click.group()
@click.version_option(version=__version__, prog_name="callwire")
@click.option("--log-level", default=None, help="Override CALLWIRE_LOG_LEVEL")
def cli(log_level: str | None):
    """callwire CLI - Send typed requests through the configured transport."""
    from ..client import CallwireConfig

    level = (log_level or CallwireConfig().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def setup_cli():
    """Register all commands."""
    from .call import call
    from .info import info
    from .storage import storage

    cli.add_command(call)
    cli.add_command(storage)
    cli.add_command(info)


setup_cli()


def main():
    """Entry point for callwire CLI."""
    cli()


if __name__ == "__main__":
    main()
