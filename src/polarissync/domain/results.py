# pylint: disable=missing-module-docstring,line-too-long
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import SyncError


class SourceResult(BaseModel):
    """
    Result of enumerating one source.

    Uses Railway-oriented programming pattern with success/failure variants.
    """

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Source label (inventory, activedirectory, azure)")
    success: bool = Field(..., description="Whether enumeration succeeded")
    identifiers: FrozenSet[str] = Field(default_factory=frozenset, description="Normalized computer identifiers")
    error_kind: Optional[str] = Field(None, description="Error classification if failed")
    error_message: Optional[str] = Field(None, description="Error details if failed")

    @classmethod
    def ok(cls, source: str, identifiers: FrozenSet[str]) -> "SourceResult":
        return cls(source=source, success=True, identifiers=identifiers)

    @classmethod
    def failed(cls, source: str, error: SyncError) -> "SourceResult":
        return cls(source=source, success=False, error_kind=error.kind, error_message=str(error))

    def is_success(self) -> bool:
        """Check if enumeration was successful."""
        return self.success

    def get_error(self) -> Optional[str]:
        """Get error message if failed."""
        return self.error_message if not self.success else None


class RemovalReport(BaseModel):
    """Outcome of applying removals to the inventory."""

    removed: List[str] = Field(default_factory=list, description="Identifiers deleted from the inventory")
    failed: List[str] = Field(default_factory=list, description="Candidates whose delete failed or matched no row")
    exempt: List[str] = Field(default_factory=list, description="Missing from every directory but exempt")
    retained: int = Field(0, description="Inventory records still present in a directory")
    dry_run: bool = Field(False, description="Candidates were listed but the sink was not called")
    pending: List[str] = Field(default_factory=list, description="Candidates not applied because of dry run")

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def exempt_count(self) -> int:
        return len(self.exempt)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


class SyncRunResult(BaseModel):
    """
    Result of a full sync run.

    A failed run carries the phase that stopped it; no removals happen after
    a failed phase.
    """

    success: bool = Field(..., description="Whether the whole pipeline completed")
    report: Optional[RemovalReport] = Field(None, description="Removal report when reconciliation ran")
    source_counts: Dict[str, int] = Field(default_factory=dict, description="Records retrieved per source")
    failed_phase: Optional[str] = Field(None, description="Source or phase that failed")
    error_kind: Optional[str] = Field(None, description="Error classification if failed")
    error_message: Optional[str] = Field(None, description="Error details if failed")

    @property
    def removed_count(self) -> int:
        return self.report.removed_count if self.report else 0
