"""clickonce-fetch CLI - Command line interface for clickonce-fetch."""
import logging
import sys
from pathlib import Path

import click

from clickonce_fetch.core.errors import (
    ClickOnceError,
    DecodeError,
    IntegrityError,
    NotFoundError,
)
from clickonce_fetch.deploy import DeploymentSession, SessionConfig

logger = logging.getLogger("clickonce_fetch")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 3
EXIT_INTEGRITY = 4
EXIT_DECODE = 5


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )


def _exit_code(error: ClickOnceError) -> int:
    if isinstance(error, NotFoundError):
        return EXIT_NOT_FOUND
    if isinstance(error, IntegrityError):
        return EXIT_INTEGRITY
    if isinstance(error, DecodeError):
        return EXIT_DECODE
    return EXIT_FAILURE


@click.group()
def main():
    """clickonce-fetch - Download and verify ClickOnce applications."""
    pass


@main.command()
@click.argument("app_url")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory where deployed files are saved (default: current directory)",
)
@click.option(
    "--file",
    "files",
    multiple=True,
    help="Only download this file (bare filename, repeatable)",
)
@click.option("--timeout", type=float, default=30.0, help="Network timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Log download progress")
def get(app_url: str, output_dir: Path, files: tuple, timeout: float, verbose: bool):
    """Download a ClickOnce application and save its files.

    Examples:
        clickonce-fetch get https://example.com/app/App.application
        clickonce-fetch get https://example.com/app/App.application --file App.exe

    Exit codes:
        0: Success
        1: Generic runtime failure
        2: Invalid CLI usage
        3: Application or requested file not found
        4: Size or digest verification failed
        5: Manifest cannot be decoded
    """
    _configure_logging(verbose)

    try:
        config = SessionConfig.build(output_dir=output_dir, timeout=timeout)
        with DeploymentSession(config) as session:
            session.init(app_url)
            if files:
                session.get(list(files))
            else:
                session.get_all()
            deployed = session.deployed_files
    except ClickOnceError as e:
        logger.error(f"Download failed: {str(e)}")
        sys.exit(_exit_code(e))

    click.echo(f"[OK] Application downloaded: {app_url}")
    click.echo(f"  Files retrieved: {len(deployed)}")
    click.echo(f"  Output: {output_dir}")
    sys.exit(EXIT_OK)


@main.command(name="list")
@click.argument("app_url")
@click.option("--timeout", type=float, default=30.0, help="Network timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Log download progress")
def list_files(app_url: str, timeout: float, verbose: bool):
    """Retrieve a ClickOnce application in memory and list its files.

    Every file is downloaded and verified, nothing is written to disk.
    """
    _configure_logging(verbose)

    try:
        config = SessionConfig.build(timeout=timeout)
        with DeploymentSession(config) as session:
            session.init(app_url)
            session.get_all()
            deployed = session.deployed_files
    except ClickOnceError as e:
        logger.error(f"Listing failed: {str(e)}")
        sys.exit(_exit_code(e))

    for path in sorted(deployed):
        deployed_file = deployed[path]
        click.echo(f"{deployed_file.type.value:<18} {len(deployed_file.content):>10}  {path}")
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
