"""
CLI main entry point.

    polarissync run [--config PATH] [--dry-run] [--verbose]
    polarissync validate [--config PATH]
"""

import logging
from pathlib import Path

import typer
from rich.console import Console

from polarissync.application.container import Container
from polarissync.domain.errors import ConfigurationError
from polarissync.infrastructure.config import ConfigRepository, DEFAULT_CONFIG_FILE
from polarissync.infrastructure.logging_config import log_file_path, setup_logging

from .formatters import ConfigSummaryFormatter, RunResultFormatter

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="polarissync",
    help="Remove Polaris workstation records for computers that no longer exist in AD or Azure AD.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

CONFIG_OPTION = typer.Option(
    Path(DEFAULT_CONFIG_FILE), "--config", "-c", help="Path to the JSON configuration file."
)


@app.command()
def run(
    config: Path = CONFIG_OPTION,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="List the computers that would be removed without deleting them."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output on the console."),
):
    """
    Reconcile the workstation inventory against the enabled directories.

    Loads the inventory, loads every enabled directory, then removes the
    records no directory knows about. Any source failure aborts the run
    before anything is removed.
    """
    level = logging.DEBUG if verbose else logging.INFO
    setup_logging(level)

    try:
        container = Container.from_config_file(config)
    except ConfigurationError as e:
        # Still record the failure in the log file when its section is readable
        logging_settings = ConfigRepository(config).load_logging_settings()
        if logging_settings is not None:
            setup_logging(level, log_file_path(logging_settings))
        logger.error("%s", e)
        console.print(f"[red]❌ Error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(level, log_file_path(container.config.logging))

    result = container.sync_service.run(dry_run=dry_run)
    RunResultFormatter(console).display(result)

    if not result.success:
        logger.error("Sync failed in %s: %s", result.failed_phase, result.error_message)
        raise typer.Exit(1)


@app.command()
def validate(config: Path = CONFIG_OPTION):
    """
    Validate the configuration file and show the effective settings.
    """
    try:
        sync_config = ConfigRepository(config).load_sync_config()
    except ConfigurationError as e:
        console.print(f"[red]❌ Configuration validation failed:[/red] {e}")
        raise typer.Exit(1)

    ConfigSummaryFormatter(console).display(sync_config)


def main() -> int:
    """
    Main entry point for the PolarisSync CLI.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    try:
        app()
    except SystemExit as e:
        if e.code is None or isinstance(e.code, int):
            return e.code or 0
        return 1
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]❌ Unexpected error:[/red] {e}")
        return 1
    return 0
