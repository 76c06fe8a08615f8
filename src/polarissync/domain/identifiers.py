"""
Computer identifier normalization.

Every source names machines with its own casing; all set comparisons are
done on the uppercased form.
"""

from typing import FrozenSet, Iterable, NewType, Optional

ComputerIdentifier = NewType("ComputerIdentifier", str)


def normalize(raw: str) -> ComputerIdentifier:
    """
    Canonical comparison key for a raw machine name.

    Only case is folded. Surrounding whitespace is left alone; sources are
    expected to hand over trimmed names.
    """
    return ComputerIdentifier(raw.upper())


def identifier_set(names: Iterable[Optional[str]]) -> FrozenSet[ComputerIdentifier]:
    """
    Build a set of identifiers, dropping null, empty and whitespace-only names.

    Args:
        names: Raw names as returned by a source or read from configuration

    Returns:
        Frozen set of normalized identifiers
    """
    return frozenset(normalize(name) for name in names if name and name.strip())
