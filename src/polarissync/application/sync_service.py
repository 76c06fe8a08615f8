"""
Sync pipeline.

Inventory first, then every enabled directory, then reconciliation. Any
failed phase ends the run before a single record is removed; the caller
decides what a failed run means for the process.
"""

import logging
from typing import Dict, Iterable, Protocol, Sequence

from polarissync.domain.errors import ConfigurationError
from polarissync.domain.identifiers import identifier_set
from polarissync.domain.results import SourceResult, SyncRunResult

from .reconciliation import reconcile
from .sources import ComputerSource, RemovalSink, collect, collect_authoritative

logger = logging.getLogger(__name__)


class InventorySource(ComputerSource, RemovalSink, Protocol):
    """The inventory is both the baseline and the removal sink."""


class SyncService:
    """
    Orchestrates one reconciliation run.

    Holds no state between runs; every set is rebuilt by run().
    """

    def __init__(self, inventory: InventorySource, directories: Sequence[ComputerSource],
                 exempt_computers: Iterable[str] = ()):
        """
        Args:
            inventory: Inventory store, read first and used for removals
            directories: Enabled authoritative sources, queried in order
            exempt_computers: Raw names never removed; normalized here
        """
        self.inventory = inventory
        self.directories = list(directories)
        self.exempt = identifier_set(exempt_computers)

    def run(self, dry_run: bool = False) -> SyncRunResult:
        """
        Execute the full pipeline.

        Args:
            dry_run: Compute removals but leave the inventory untouched

        Returns:
            SyncRunResult; success is False when any phase failed
        """
        counts: Dict[str, int] = {}

        if not self.directories:
            error = ConfigurationError(
                "no directory source is enabled; refusing to treat every computer as missing",
                source="config",
            )
            logger.error("%s", error)
            return SyncRunResult(
                success=False, failed_phase="config",
                error_kind=error.kind, error_message=str(error),
            )

        inventory = collect(self.inventory)
        if not inventory.is_success():
            return self._failed(inventory, counts)
        counts[inventory.source] = len(inventory.identifiers)

        results, authoritative = collect_authoritative(self.directories)
        for result in results:
            if not result.is_success():
                return self._failed(result, counts)
            counts[result.source] = len(result.identifiers)

        logger.info("Searching for computers to remove from the database")
        report = reconcile(inventory.identifiers, authoritative, self.exempt, self.inventory, dry_run=dry_run)
        return SyncRunResult(success=True, report=report, source_counts=counts)

    @staticmethod
    def _failed(result: SourceResult, counts: Dict[str, int]) -> SyncRunResult:
        return SyncRunResult(
            success=False,
            source_counts=counts,
            failed_phase=result.source,
            error_kind=result.error_kind,
            error_message=result.error_message,
        )

