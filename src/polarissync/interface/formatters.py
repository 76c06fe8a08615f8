"""
Result formatters for CLI commands.

Provides formatting and display logic for command results.
"""

from rich.console import Console
from rich.table import Table

from polarissync.domain.config import SyncConfig
from polarissync.domain.results import SyncRunResult


class RunResultFormatter:
    """Formatter for sync run results."""

    def __init__(self, console: Console):
        self.console = console

    def display(self, result: SyncRunResult) -> None:
        """
        Display the outcome of a run.

        Args:
            result: Result returned by SyncService.run()
        """
        if not result.success:
            self.console.print(
                f"[red]❌ Sync aborted during {result.failed_phase} ({result.error_kind}):[/red] "
                f"{result.error_message}"
            )
            self.console.print("[yellow]No computers were removed.[/yellow]")
            return

        report = result.report
        table = Table(title="Sync Summary")
        table.add_column("Item")
        table.add_column("Count", justify="right")

        for source, count in result.source_counts.items():
            table.add_row(f"Records from {source}", str(count))
        table.add_row("Still present in a directory", str(report.retained))
        table.add_row("Skipped (exempt)", str(report.exempt_count))
        if report.dry_run:
            table.add_row("Would remove", str(len(report.pending)))
        else:
            table.add_row("Removed", str(report.removed_count))
            table.add_row("Failed to remove", str(report.failed_count))

        self.console.print(table)

        if report.failed:
            self.console.print("[yellow]Could not remove:[/yellow] " + ", ".join(sorted(report.failed)))
        if report.dry_run and report.pending:
            self.console.print("[blue]Would remove:[/blue] " + ", ".join(sorted(report.pending)))
        self.console.print("[green]✅ Sync completed[/green]")


class ConfigSummaryFormatter:
    """Formatter for configuration summary results."""

    def __init__(self, console: Console):
        self.console = console

    @staticmethod
    def _secret(value) -> str:
        return "set" if value is not None and value.get_secret_value() else "not set"

    def display(self, config: SyncConfig) -> None:
        """
        Display the effective configuration with secrets masked.

        Args:
            config: Validated configuration
        """
        ad, azure, db = config.active_directory, config.azure, config.database

        table = Table(title="Configuration Summary")
        table.add_column("Setting")
        table.add_column("Value")

        table.add_row("database", f"{db.host}:{db.port}/{db.name}")
        table.add_row("database auth", "trusted" if db.trusted else f"{db.domain}\\{db.username}")
        table.add_row("exempt computers", str(len(db.exempt_computers)))
        table.add_row("activedirectory", f"enabled ({ad.url}, {ad.dn})" if ad.enabled else "disabled")
        if ad.enabled:
            table.add_row("activedirectory bind", f"{ad.bind_user} (password {self._secret(ad.password)})")
        if azure.enabled:
            method = "Microsoft Graph" if azure.uses_graph else f"{azure.shell} (AzureAD module)"
            table.add_row("azure", f"enabled via {method}")
        else:
            table.add_row("azure", "disabled")
        table.add_row("log file", config.logging.location if config.logging.enabled else "disabled")

        self.console.print(table)
        self.console.print("[green]✅ Configuration is valid[/green]")
