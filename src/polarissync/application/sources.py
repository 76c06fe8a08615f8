"""
Source adapter contract and collection helpers.

Any object with a ``name`` and a ``list_computers()`` method returning
normalized identifiers can act as a source. Adding a new directory means
adding an adapter to the list the container builds, nothing else.
"""

import logging
from typing import FrozenSet, Iterable, List, Protocol, Tuple

from polarissync.domain.errors import SyncError
from polarissync.domain.identifiers import ComputerIdentifier
from polarissync.domain.results import SourceResult

logger = logging.getLogger(__name__)


class ComputerSource(Protocol):
    """A system that can list the computers it knows about."""

    name: str

    def list_computers(self) -> FrozenSet[ComputerIdentifier]:
        ...


class RemovalSink(Protocol):
    """Deletes inventory records one at a time."""

    def remove(self, identifier: ComputerIdentifier) -> bool:
        ...


def collect(source: ComputerSource) -> SourceResult:
    """
    Enumerate one source, turning its fatal error into a failed result.

    Only SyncError is converted; anything else is a bug and propagates.
    """
    logger.info("Loading the list of computers from %s", source.name)
    try:
        identifiers = source.list_computers()
    except SyncError as e:
        logger.error("%s: %s", source.name, e)
        return SourceResult.failed(source.name, e)
    return SourceResult.ok(source.name, identifiers)


def collect_authoritative(sources: Iterable[ComputerSource]) -> Tuple[List[SourceResult], FrozenSet[str]]:
    """
    Union the identifiers of every enabled directory source.

    Stops at the first failed source; the returned list then ends with that
    failure and the union must not be used.

    Returns:
        (results in collection order, union of identifiers)
    """
    results: List[SourceResult] = []
    authoritative: set = set()
    for source in sources:
        result = collect(source)
        results.append(result)
        if not result.is_success():
            break
        authoritative |= result.identifiers
    return results, frozenset(authoritative)
