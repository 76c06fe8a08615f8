"""
Reconciliation engine.

Works purely on identifier sets and a removal sink; it never reads
configuration, opens connections or terminates the process.
"""

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, List

from polarissync.domain.results import RemovalReport

from .sources import RemovalSink

logger = logging.getLogger(__name__)


@dataclass
class RemovalPlan:
    """Decision for every inventory record."""

    candidates: List[str] = field(default_factory=list)
    exempt: List[str] = field(default_factory=list)
    retained: int = 0


def plan_removals(inventory: AbstractSet[str], authoritative: AbstractSet[str],
                  exempt: AbstractSet[str]) -> RemovalPlan:
    """
    Split the inventory into retained, exempt and removal candidates.

    Exemption is only consulted for records missing from every directory, so
    a machine that is both present and exempt counts as retained.

    Candidates follow the inventory's iteration order; no ordering is promised.
    """
    plan = RemovalPlan()
    for identifier in inventory:
        if identifier in authoritative:
            plan.retained += 1
        elif identifier in exempt:
            plan.exempt.append(identifier)
        else:
            plan.candidates.append(identifier)
    return plan


def reconcile(inventory: AbstractSet[str], authoritative: AbstractSet[str],
              exempt: AbstractSet[str], sink: RemovalSink, dry_run: bool = False) -> RemovalReport:
    """
    Remove inventory records that no directory knows about.

    Args:
        inventory: Identifiers currently in the inventory
        authoritative: Union of identifiers from every enabled directory
        exempt: Identifiers never to be removed
        sink: Receives one remove() call per candidate
        dry_run: Report candidates without calling the sink

    Returns:
        RemovalReport; a failed removal is recorded and the batch continues
    """
    plan = plan_removals(inventory, authoritative, exempt)
    report = RemovalReport(retained=plan.retained, exempt=plan.exempt, dry_run=dry_run)

    for identifier in plan.exempt:
        logger.info("Skipping %s, exempt from removal", identifier)

    for identifier in plan.candidates:
        if dry_run:
            logger.info("Would remove %s (dry run)", identifier)
            report.pending.append(identifier)
        elif sink.remove(identifier):
            report.removed.append(identifier)
        else:
            report.failed.append(identifier)

    if dry_run:
        logger.info("%d computers would be removed from database", len(report.pending))
    else:
        logger.info("%d computers removed from database", report.removed_count)
    if report.failed:
        logger.warning("%d computers could not be removed", report.failed_count)
    return report
